"""
Contract Deployment Wrapper
Runs scripts/deploy_contract.py from the caller's directory
"""

import os
import subprocess
import sys

PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))

if __name__ == "__main__":
    print("=" * 70, file=sys.stderr)
    print("RoyaltyDistribution Contract Deployment", file=sys.stderr)
    print("=" * 70, file=sys.stderr)

    # Relative --env-file/--artifacts-dir/--config stay relative to the caller
    env = dict(os.environ)
    env['PYTHONPATH'] = os.pathsep.join(filter(None, [PROJECT_ROOT, env.get('PYTHONPATH')]))

    # Run deployment script, forwarding CLI flags
    result = subprocess.run(
        [sys.executable, "-m", "scripts.deploy_contract", *sys.argv[1:]],
        env=env
    )

    sys.exit(result.returncode)

"""
CLI entry point, when used as a module: `python -m tunnelkeeper`.
"""
from tunnelkeeper import cli

if __name__ == '__main__':
    cli.main()

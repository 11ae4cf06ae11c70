"""
CLI entry point, when used as a module: `python -m kubeswagger`.

Useful for debugging in the IDEs (use the start-mode "Module", module "kubeswagger").
"""
from kubeswagger import cli

if __name__ == '__main__':
    cli.main()

# Path and File Name : /home/kutt/kutt-installer/kutt_installer/__main__.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: `python -m kutt_installer` dispatch to install, uninstall or configure-oidc

import sys

from . import installer, oidc_configurator, uninstaller

COMMANDS = {
    'install': installer.main,
    'uninstall': uninstaller.main,
    'configure-oidc': oidc_configurator.main,
}


def main(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or argv[0] not in COMMANDS:
        print(f"usage: python -m kutt_installer {{{','.join(COMMANDS)}}} [options]", file=sys.stderr)
        sys.exit(2)
    COMMANDS[argv[0]](argv[1:])


if __name__ == '__main__':
    main()

#!/usr/bin/env python
"""Django's command-line utility for administrative tasks."""
import os
import sys


def main():
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "erp_project.settings")
    from django.core.management import execute_from_command_line

    argv = list(sys.argv)
    # runserver listens on SERVER_PORT unless an address is given
    if len(argv) == 2 and argv[1] == "runserver":
        argv.append("0.0.0.0:" + os.environ.get("SERVER_PORT", "12000"))
    execute_from_command_line(argv)


if __name__ == "__main__":
    main()

"""
CLI Command Modules

Sub-applications registered on the main typer app, plus shared output helpers.
"""

from mcmod.cli import config_cmd, output

__all__ = ['config_cmd', 'output']

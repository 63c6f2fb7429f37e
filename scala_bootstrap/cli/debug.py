from functools import wraps

import click

from .utils.logging import configure_logging


def add_debug_option(cmd):
    """Decorator to add a --debug option to commands and groups"""
    if isinstance(cmd, click.Command):
        if not any(param.name == "debug" for param in cmd.params):
            cmd.params.insert(0, _debug_option())
        return cmd

    @_debug_decorator
    @wraps(cmd)
    def wrapper(*args, **kwargs):
        return cmd(*args, **kwargs)

    return wrapper


def _debug_option() -> click.Option:
    return click.Option(
        ["--debug/--no-debug"],
        is_eager=True,
        expose_value=False,
        callback=lambda ctx, param, value: _set_debug(ctx, value),
        help="Enable debug mode",
    )


def _debug_decorator(f):
    return click.option(
        "--debug/--no-debug",
        is_eager=True,
        expose_value=False,
        callback=lambda ctx, param, value: _set_debug(ctx, value),
        help="Enable debug mode",
    )(f)


def _set_debug(ctx, value: bool):
    """Callback for the debug flag"""
    root_ctx = ctx.find_root()
    root_ctx.ensure_object(dict)

    if "DEBUG" not in root_ctx.obj:
        root_ctx.obj["DEBUG"] = False

    # Any level may turn debug on; only the top level may turn it off
    cmd_depth = len(ctx.command_path.split())
    if value is True or cmd_depth == 1:
        root_ctx.obj["DEBUG"] = value

    configure_logging(root_ctx.obj["DEBUG"])
    return root_ctx.obj["DEBUG"]

"""``specread config``: show, set and reset the user's config file."""

from __future__ import annotations

import typer
from pydantic import ValidationError

from specread.exceptions import ConfigError
from specread.exit_codes import EXIT_INVALID_USAGE
from specread.output import error, info, print_record, success

config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration, overrides included.

    Example::

        specread --plain config show
    """
    from specread.config import get_config_dir

    info(f"Config directory: {get_config_dir()}")
    print_record(ctx.obj["config"].model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key, e.g. 'decoder.max_depth'."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set one value in the global config file.

    The value is validated against the field it targets, so ``64`` becomes an
    integer and ``yes``/``off`` become booleans. Unknown keys and values the
    field rejects exit with status 2.

    Example::

        specread config set decoder.strict_default_response true
    """
    from specread.config import load_global_config, save_global_config
    from specread.models import GlobalConfig

    try:
        data = load_global_config().model_dump(mode="json")
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    section, _, field = key.partition(".")
    if not isinstance(data.get(section), dict) or field not in data[section]:
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    data[section][field] = value
    try:
        config = GlobalConfig.model_validate(data)
    except ValidationError as exc:
        error(f"Invalid value for {key}: {exc.errors()[0]['msg']}")
        raise typer.Exit(code=EXIT_INVALID_USAGE) from None

    save_global_config(config)
    success(f"Set {key} = {getattr(getattr(config, section), field)}")


@config_app.command("reset")
def config_reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
) -> None:
    """Reset the global configuration to defaults."""
    from specread.config import save_global_config
    from specread.models import GlobalConfig

    if not yes and not typer.confirm("Reset all config to defaults?"):
        info("Cancelled.")
        raise typer.Exit()
    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")

from __future__ import annotations

import importlib
import sys
import threading
import traceback
import types
import typing as t
from pathlib import Path

import pydantic as p

import transmute
import transmute.lib.cli as click
from transmute.core import TransmuteContainer
from transmute.model import DeploymentEnvironment

ConfigRoot = Path(transmute.__file__).resolve().parents[1] / "config"
Commands: t.Final = ("calculate", "schema", "shadow")

# command modules imported so far; wired into the container at boot
_loaded: dict[str, types.ModuleType] = {}


class LazyGroup(click.Group):
    """Import ``transmute.cli.<name>`` on first use and return its ``<name>`` command."""

    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(Commands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        if cmd_name not in Commands:
            return None
        if cmd_name not in _loaded:
            _loaded[cmd_name] = importlib.import_module(f"{__package__}.{cmd_name}")
        return getattr(_loaded[cmd_name], cmd_name)


@click.group(cls=LazyGroup)
@click.option("-E", "--env", default=DeploymentEnvironment.Local, type=click.EnumType(DeploymentEnvironment))
@click.option("-c", "--config-root", default=ConfigRoot, type=click.URIParamType(dir_ok=True))
@click.option(
    "-o",
    "--override",
    multiple=True,
    help="override a configuration value, e.g., -o transmutation.min_floor=60",
)
@click.option("-D", "--debug", is_flag=True, default=False)
@click.pass_obj
def main(
    ct: TransmuteContainer,
    env: DeploymentEnvironment,
    config_root: p.FileUrl,
    override: tuple[str, ...],
    debug: bool,
):
    """Transmute raw scores and keep shadow grade items in sync."""
    TransmuteContainer.boot(
        ct,
        debug=debug,
        env=env,
        config_root=config_root,
        override=override,
        wiring=tuple(_loaded.values()),
    )


def execute_command(*argv: str) -> None:
    threading.current_thread().name = "transmute-0"
    prog, *args = argv or sys.argv
    container = TransmuteContainer()

    try:
        with main.make_context(Path(prog).name, args=args) as ctx:
            ctx.obj = container
            sys.exit(t.cast(int | None, main.invoke(ctx)) or 0)
    except (EOFError, KeyboardInterrupt, click.Abort):
        click.echo("Aborted!", file=sys.stderr)
        sys.exit(1)
    except click.exceptions.Exit as ex:
        sys.exit(ex.exit_code)
    except click.ClickException as ex:
        ex.show()
        sys.exit(ex.exit_code)
    except Exception as ex:
        click.echo(click.style("ERROR ", fg="red") + str(ex), file=sys.stderr)
        if "-D" in args or "--debug" in args:
            traceback.print_exc()
        sys.exit(-1)
    finally:
        container.shutdown_resources()


if __name__ == "__main__":
    execute_command(*sys.argv)

"""CLI application for Lake Formation federated catalog tooling."""

import typer

from lfops.cli.commands.catalog import catalog_app
from lfops.cli.commands.sync import sync
from lfops.cli.common.banner import opt_print_banner

opt_print_banner()

app = typer.Typer(
    help="lfops - Lake Formation permissions for federated Glue catalogs",
    no_args_is_help=True,
)

app.command("sync")(sync)
app.add_typer(catalog_app, name="catalog")


if __name__ == "__main__":
    app()

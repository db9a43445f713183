"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdform.cli.commands import (
    collections_cmd, delete_cmd, edit_cmd, history_cmd, init_cmd, list_cmd, mkdir_cmd, new_cmd, rename_cmd,
    show_cmd,
)


app = typer.Typer(name="mdform", no_args_is_help=True, help="Front matter Markdown editor for static-site collections")

app.command(name="init")(init_cmd)
app.command(name="collections")(collections_cmd)
app.command(name="list")(list_cmd)
app.command(name="mkdir")(mkdir_cmd)
app.command(name="show")(show_cmd)
app.command(name="new")(new_cmd)
app.command(name="edit")(edit_cmd)
app.command(name="rename")(rename_cmd)
app.command(name="delete")(delete_cmd)
app.command(name="history")(history_cmd)

"""Command-line interface for scenedit.

Usage:
    scenedit new "My Scene"
    scenedit list
    scenedit show <doc-id>
    scenedit edit <doc-id>
    scenedit export <doc-id> scene.glb
"""

from __future__ import annotations

import logging
import math
import shlex
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from .core.config import EditorConfig
from .editor.session import EditorSession
from .render.builder import export_scene
from .scene.document import DocumentStore, SceneDocument
from .scene.node import PRIMITIVES, Node
from .scene.tree import count_nodes

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with rich output."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False)],
    )


def _rich_tree(root: Node | None, selected_id: str | None = None) -> Tree:
    """Build a rich Tree for display, one line per node."""
    if root is None:
        return Tree("[dim](empty tree)[/dim]")

    def label(node: Node) -> str:
        prim = f" [magenta]{node.render.primitive}[/magenta]" if node.render else ""
        marker = "[bold yellow]* [/bold yellow]" if node.id == selected_id else ""
        return f"{marker}[cyan]{escape(node.name)}[/cyan]{prim} [dim]{node.id}[/dim]"

    def walk(node: Node, branch: Tree) -> None:
        for child in node.children:
            walk(child, branch.add(label(child)))

    tree = Tree(label(root))
    walk(root, tree)
    return tree


def _load_document(store: DocumentStore, doc_id: str) -> SceneDocument:
    try:
        return store.load(doc_id)
    except FileNotFoundError as e:
        raise click.ClickException(str(e))
    except ValueError as e:
        raise click.ClickException(f"Invalid document {doc_id}: {e}")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Editor configuration JSON file",
)
@click.option(
    "--store", "store_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Documents directory (overrides config)",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: Path | None, store_dir: Path | None) -> None:
    """scenedit - hierarchical 3D scene editor."""
    ctx.ensure_object(dict)
    setup_logging(verbose)

    cfg = EditorConfig.from_file(config_path) if config_path else EditorConfig.default()
    ctx.obj["config"] = cfg
    ctx.obj["store"] = DocumentStore(store_dir or cfg.storage.documents_dir)


@main.command()
@click.argument("title", required=False)
@click.pass_context
def new(ctx: click.Context, title: str | None) -> None:
    """Create a new scene document."""
    cfg: EditorConfig = ctx.obj["config"]
    store: DocumentStore = ctx.obj["store"]

    document = store.create(
        title=title or cfg.defaults.document_title,
        root_name=cfg.defaults.root_name,
    )
    console.print(f"[green]Created[/green] {document.title} [dim]({document.id})[/dim]")


@main.command(name="list")
@click.pass_context
def list_documents(ctx: click.Context) -> None:
    """List saved scene documents."""
    store: DocumentStore = ctx.obj["store"]
    documents = store.list_documents()

    if not documents:
        console.print("[dim]No documents found[/dim]")
        return

    table = Table(title="Scene Documents")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Nodes", justify="right", style="green")

    for document in documents:
        table.add_row(document.id, document.title, str(count_nodes(document.root)))

    console.print(table)


@main.command()
@click.argument("doc_id")
@click.pass_context
def show(ctx: click.Context, doc_id: str) -> None:
    """Print the node tree of a document."""
    document = _load_document(ctx.obj["store"], doc_id)
    console.print(f"[bold]{document.title}[/bold]")
    console.print(_rich_tree(document.root))


@main.command()
@click.argument("doc_id")
@click.pass_context
def remove(ctx: click.Context, doc_id: str) -> None:
    """Delete a document."""
    store: DocumentStore = ctx.obj["store"]
    if not store.delete(doc_id):
        raise click.ClickException(f"Document not found: {doc_id}")
    console.print(f"[green]Removed[/green] {doc_id}")


@main.command()
@click.argument("doc_id")
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def export(ctx: click.Context, doc_id: str, output: Path) -> None:
    """Export a document's meshes (.glb, .gltf, .obj, .stl, ...)."""
    cfg: EditorConfig = ctx.obj["config"]
    document = _load_document(ctx.obj["store"], doc_id)
    with console.status("Exporting..."):
        path = export_scene(document.root, output, cfg.render)
    console.print(f"[green]Exported[/green] {path}")


# Shell commands. Each runs against the EditorSession in ctx.obj.

@click.group(name="shell")
def shell() -> None:
    """Editor shell commands."""


def _target(session: EditorSession, node_id: str | None) -> str:
    node_id = node_id or session.selected_id
    if node_id is None:
        raise click.UsageError("No node given and nothing selected")
    return node_id


def _report(changed: bool, what: str) -> None:
    if changed:
        console.print(f"[green]{what}[/green]")
    else:
        console.print("[yellow]No change[/yellow]")


@shell.command()
@click.argument("parent_id")
@click.argument("name", required=False)
@click.option("--primitive", "-p", type=click.Choice(PRIMITIVES), help="Mesh to draw")
@click.option("--position", nargs=3, type=float, default=None, help="X Y Z position")
@click.pass_obj
def add(session: EditorSession, parent_id: str, name: str | None,
        primitive: str | None, position: tuple[float, float, float] | None) -> None:
    """Add a node under PARENT_ID."""
    node = session.add_node(parent_id, name, primitive=primitive, position=position)
    if node is None:
        console.print(f"[yellow]No node {parent_id}[/yellow]")
    else:
        console.print(f"[green]Added[/green] {node.name} [dim]({node.id})[/dim]")


@shell.command()
@click.argument("node_id", required=False)
@click.pass_obj
def rm(session: EditorSession, node_id: str | None) -> None:
    """Delete a node and its subtree."""
    _report(session.delete_node(_target(session, node_id)), "Deleted")


@shell.command()
@click.argument("node_id")
@click.argument("name")
@click.pass_obj
def rename(session: EditorSession, node_id: str, name: str) -> None:
    """Rename a node."""
    _report(session.rename(node_id, name), "Renamed")


@shell.command()
@click.argument("node_id")
@click.argument("parent_id")
@click.option("--keep-world", is_flag=True, help="Keep the node's world placement")
@click.pass_obj
def move(session: EditorSession, node_id: str, parent_id: str, keep_world: bool) -> None:
    """Move NODE_ID under PARENT_ID."""
    _report(session.move(node_id, parent_id, keep_world=keep_world), "Moved")


@shell.command()
@click.argument("node_id")
@click.argument("index", type=int)
@click.pass_obj
def reorder(session: EditorSession, node_id: str, index: int) -> None:
    """Move NODE_ID to INDEX among its siblings."""
    _report(session.reorder(node_id, index), "Reordered")


@shell.command()
@click.argument("xyz", nargs=3, type=float)
@click.option("--node", "node_id", help="Node id (default: selection)")
@click.pass_obj
def pos(session: EditorSession, xyz: tuple[float, float, float], node_id: str | None) -> None:
    """Set position."""
    _report(session.set_transform(_target(session, node_id), position=xyz), "Moved")


@shell.command()
@click.argument("xyz", nargs=3, type=float)
@click.option("--node", "node_id", help="Node id (default: selection)")
@click.pass_obj
def rot(session: EditorSession, xyz: tuple[float, float, float], node_id: str | None) -> None:
    """Set rotation in degrees."""
    radians = tuple(math.radians(v) for v in xyz)
    _report(session.set_transform(_target(session, node_id), rotation=radians), "Rotated")


@shell.command()
@click.argument("xyz", nargs=3, type=float)
@click.option("--node", "node_id", help="Node id (default: selection)")
@click.pass_obj
def scale(session: EditorSession, xyz: tuple[float, float, float], node_id: str | None) -> None:
    """Set scale."""
    _report(session.set_transform(_target(session, node_id), scale=xyz), "Scaled")


@shell.command()
@click.argument("primitive", type=click.Choice(PRIMITIVES))
@click.option("--node", "node_id", help="Node id (default: selection)")
@click.pass_obj
def prim(session: EditorSession, primitive: str, node_id: str | None) -> None:
    """Set the primitive drawn for a node."""
    _report(session.set_primitive(_target(session, node_id), primitive), "Updated")


@shell.command()
@click.argument("node_id", required=False)
@click.pass_obj
def select(session: EditorSession, node_id: str | None) -> None:
    """Select a node (no argument clears the selection)."""
    if not session.select(node_id):
        console.print(f"[yellow]No node {node_id}[/yellow]")


@shell.command()
@click.argument("node_id", required=False)
@click.pass_obj
def copy(session: EditorSession, node_id: str | None) -> None:
    """Copy a node (default: selection)."""
    _report(session.copy(node_id), "Copied")


@shell.command()
@click.argument("anchor_id", required=False)
@click.pass_obj
def paste(session: EditorSession, anchor_id: str | None) -> None:
    """Paste the copied node after ANCHOR_ID (default: selection)."""
    node = session.paste(anchor_id)
    if node is None:
        console.print("[yellow]Nothing pasted[/yellow]")
    else:
        console.print(f"[green]Pasted[/green] {node.name} [dim]({node.id})[/dim]")


@shell.command()
@click.pass_obj
def undo(session: EditorSession) -> None:
    """Undo the last edit."""
    _report(session.undo(), "Undone")


@shell.command()
@click.pass_obj
def redo(session: EditorSession) -> None:
    """Redo the last undone edit."""
    _report(session.redo(), "Redone")


@shell.command(name="show")
@click.pass_obj
def shell_show(session: EditorSession) -> None:
    """Print the tree."""
    console.print(_rich_tree(session.root, session.selected_id))


@shell.command()
@click.pass_obj
def save(session: EditorSession) -> None:
    """Save the document."""
    path = session.save()
    if path is not None:
        console.print(f"[green]Saved[/green] {path}")


def run_shell_line(session: EditorSession, line: str) -> None:
    """Execute one shell command line against the session."""
    try:
        args = shlex.split(line)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        return
    if not args:
        return
    try:
        shell.main(args, prog_name="", standalone_mode=False, obj=session)
    except click.ClickException as e:
        console.print(f"[red]{e.format_message()}[/red]")


@main.command()
@click.argument("doc_id")
@click.pass_context
def edit(ctx: click.Context, doc_id: str) -> None:
    """Open an interactive editing shell on a document.

    Type "help" for commands and "quit" to leave.
    """
    cfg: EditorConfig = ctx.obj["config"]
    store: DocumentStore = ctx.obj["store"]
    session = EditorSession(_load_document(store, doc_id), store=store, config=cfg)

    console.print(f"[bold]Editing {session.title}[/bold] [dim]({session.document_id})[/dim]")
    console.print(_rich_tree(session.root))

    while True:
        try:
            line = click.prompt("scenedit", default="", show_default=False, prompt_suffix="> ")
        except (EOFError, click.Abort):
            break
        line = line.strip()
        if line in ("quit", "exit"):
            break
        if line == "help":
            run_shell_line(session, "--help")
            continue
        run_shell_line(session, line)

    if cfg.storage.save_on_exit:
        path = session.save()
        if path is not None:
            console.print(f"[green]Saved[/green] {path}")


if __name__ == "__main__":
    main()

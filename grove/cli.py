"""Grove CLI — moderation checks and comment threads from the terminal."""

import logging

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from grove import __version__

console = Console()


def _config(ctx: click.Context):
    return ctx.obj["config"]


def _render_forest(forest, tracker, censor_text, title: str) -> Tree:
    """Nest the visible nodes of *forest* into a rich Tree."""
    from grove.threads.visibility import walk_visible

    tree = Tree(title)
    branches = [tree]
    for depth, node in walk_visible(forest, tracker):
        del branches[depth + 1:]
        label = f"[cyan]{escape(node.display_name)}[/] [dim]#{escape(str(node.id))}[/]  {escape(censor_text(str(node.text or '')) or '')}"
        if node.replies and not tracker.is_expanded(node.id):
            label += f" [dim](+{node.subtree_size() - 1} replies hidden)[/]"
        branches.append(branches[depth].add(label))
    return tree


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "config_path", default=None, help="Moderation config YAML")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool):
    """Grove — community content moderation and threaded comments."""
    from grove.config import config_from_env, load_config
    from grove.logging import configure_logging

    configure_logging(logging.DEBUG if verbose else logging.WARNING)
    try:
        config = load_config(config_path) if config_path else config_from_env()
    except ValueError as e:
        raise click.UsageError(str(e)) from e
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


# ── Moderation ───────────────────────────────────────────────────────


@main.command()
@click.argument("text")
@click.pass_context
def scan(ctx: click.Context, text: str):
    """Scan TEXT for banned language and shouting."""
    verdict = _config(ctx).build_scanner().scan(text)
    if verdict.is_offensive:
        console.print(f"[red]Offensive[/] ({verdict.violation_type}): {verdict.reason}")
        ctx.exit(1)
    console.print("[green]Clean[/]")


@main.command()
@click.argument("text")
@click.pass_context
def censor(ctx: click.Context, text: str):
    """Print TEXT with banned terms masked."""
    click.echo(_config(ctx).build_censor().censor(text))


@main.command("validate-post")
@click.argument("title")
@click.argument("body")
@click.pass_context
def validate_post(ctx: click.Context, title: str, body: str):
    """Validate a post submission."""
    result = _config(ctx).build_validator().validate_post(title, body)
    if not result.is_valid:
        console.print(f"[red]Rejected:[/] {result.error_message}")
        ctx.exit(1)
    console.print("[green]Accepted[/]")


@main.command("validate-comment")
@click.argument("text")
@click.pass_context
def validate_comment(ctx: click.Context, text: str):
    """Validate a comment submission."""
    result = _config(ctx).build_validator().validate_comment(text)
    if not result.is_valid:
        console.print(f"[red]Rejected:[/] {result.error_message}")
        ctx.exit(1)
    console.print("[green]Accepted[/]")


@main.command()
@click.option("--patterns", is_flag=True, help="Show the compiled regex for each term")
@click.pass_context
def terms(ctx: click.Context, patterns: bool):
    """List the banned vocabulary."""
    lexicon = _config(ctx).build_lexicon()

    table = Table(title=f"Banned Terms ({len(lexicon)})")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Term", style="cyan")
    if patterns:
        table.add_column("Pattern")

    for i, pattern in enumerate(lexicon.patterns, start=1):
        row = [str(i), pattern.term]
        if patterns:
            row.append(escape(pattern.source))
        table.add_row(*row)

    console.print(table)


# ── Threads ──────────────────────────────────────────────────────────


@main.command()
@click.argument("records_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--expand", "expand_ids", multiple=True, help="Expand the replies of this comment id")
@click.option("--expand-all", is_flag=True, help="Expand every comment")
@click.option("--orphans", default="drop", type=click.Choice(["drop", "promote", "defer"]))
@click.option("--censor/--no-censor", "censor_text", default=True, help="Mask banned terms")
@click.pass_context
def thread(
    ctx: click.Context,
    records_path: str,
    expand_ids: tuple[str, ...],
    expand_all: bool,
    orphans: str,
    censor_text: bool,
):
    """Render a flat JSON/YAML list of comment records as a reply tree."""
    import yaml

    from grove.threads.builder import CommentTreeBuilder, OrphanPolicy
    from grove.threads.mutator import iter_nodes
    from grove.threads.visibility import VisibilityTracker

    try:
        with open(records_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        console.print(f"[red]Failed to parse:[/] {e}")
        ctx.exit(1)

    if isinstance(data, dict):
        data = data.get("comments", [])
    if not isinstance(data, list):
        console.print("[red]Expected a list of comment records[/]")
        ctx.exit(1)

    builder = CommentTreeBuilder(orphans=OrphanPolicy(orphans))
    forest = builder.build(data)

    tracker = VisibilityTracker()
    for _, node in iter_nodes(forest):
        if expand_all or str(node.id) in expand_ids:
            tracker.expand(node.id)

    masker = _config(ctx).build_censor().censor if censor_text else (lambda t: t)
    console.print(_render_forest(forest, tracker, masker, f"Comments ({len(forest)} threads)"))

    if builder.orphans:
        verb = {"drop": "dropped", "promote": "promoted to top level", "defer": "deferred"}[orphans]
        console.print(f"[yellow]![/] {len(builder.orphans)} orphaned comment(s) {verb}")
    if builder.rejected:
        console.print(f"[yellow]![/] {len(builder.rejected)} malformed record(s) skipped")


@main.group()
@click.option("--store-dir", default=None, help="Comment store directory")
@click.pass_context
def comments(ctx: click.Context, store_dir: str | None):
    """Work with comments in the local JSONL store."""
    from grove.threads.store import JsonlCommentStore

    ctx.obj["store"] = JsonlCommentStore(store_dir)


def _open_thread(ctx: click.Context, post_id: str):
    from grove.threads.session import CommentThread

    thread = CommentThread(post_id, ctx.obj["store"], validator=_config(ctx).build_validator())
    thread.load()
    return thread


@comments.command("show")
@click.argument("post_id")
@click.option("--collapsed", is_flag=True, help="Only show top-level comments")
@click.pass_context
def comments_show(ctx: click.Context, post_id: str, collapsed: bool):
    """Show the comment tree of POST_ID."""
    from grove.threads.mutator import iter_nodes

    thread = _open_thread(ctx, post_id)
    if not collapsed:
        for _, node in iter_nodes(thread.forest):
            thread.visibility.expand(node.id)

    count = ctx.obj["store"].comment_count(post_id)
    masker = _config(ctx).build_censor().censor
    console.print(_render_forest(thread.forest, thread.visibility, masker, f"Post {post_id} ({count} comments)"))


@comments.command("add")
@click.argument("post_id")
@click.argument("text")
@click.option("--parent", "parent_id", default=None, help="Reply to this comment id")
@click.option("--user", "user_name", default=None, help="Display name")
@click.option("--anonymous", is_flag=True, help="Hide the author's name")
@click.pass_context
def comments_add(
    ctx: click.Context,
    post_id: str,
    text: str,
    parent_id: str | None,
    user_name: str | None,
    anonymous: bool,
):
    """Add a comment (or a reply with --parent) to POST_ID."""
    thread = _open_thread(ctx, post_id)
    try:
        outcome = thread.reply(text, user_name=user_name, parent_id=parent_id, is_anonymous=anonymous)
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    if not outcome.ok:
        console.print(f"[red]Not posted:[/] {outcome.error}")
        ctx.exit(1)
    console.print(f"[green]Posted[/] comment {outcome.node.id}")


@comments.command("delete")
@click.argument("post_id")
@click.argument("comment_id")
@click.pass_context
def comments_delete(ctx: click.Context, post_id: str, comment_id: str):
    """Delete COMMENT_ID and its replies from POST_ID."""
    thread = _open_thread(ctx, post_id)
    outcome = thread.delete(comment_id)
    if not outcome.ok:
        console.print(f"[red]Not deleted:[/] {outcome.error}")
        ctx.exit(1)
    console.print(f"[green]Deleted[/] {outcome.node.subtree_size()} comment(s)")

# coin_trail/cli.py
import logging
import click
from dotenv import load_dotenv
from coin_trail.auth import hash_password
from coin_trail.config import load_config
from coin_trail.core.cashflow import build_cashflow
from coin_trail.database import (
    create_user,
    fetch_transactions,
    get_user_by_username,
    init_db as init_database,
    list_categories,
    seed_categories,
)
from coin_trail.outputs import get_output
from coin_trail.presenter import present
from coin_trail.utils import parse_year


def _configure_logging(level):
    logging.basicConfig(
        level=str(level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _resolve_user(cfg, username):
    user = get_user_by_username(cfg['db_path'], username)
    if user is None:
        raise click.BadParameter(f"Unknown user '{username}'", param_hint='--user')
    return user


@click.group()
@click.option(
    '--config', 'config_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='Path to config.yaml (defaults to $COIN_TRAIL_CONFIG)'
)
@click.option(
    '--env-file', 'env_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Optional .env file with COIN_TRAIL_* settings'
)
@click.option(
    '--db', 'db_path',
    default=None,
    type=click.Path(dir_okay=False),
    help='SQLite database file (overrides config)'
)
@click.pass_context
def main(ctx, config_path, env_file, db_path):
    """
    Coin Trail: track income and expenses and review the yearly cashflow.
    """
    if env_file:
        load_dotenv(env_file)

    cfg = load_config(config_path)
    if db_path:
        cfg['db_path'] = db_path
    _configure_logging(cfg.get('log_level', 'INFO'))
    ctx.obj = cfg


@main.command('init-db')
@click.pass_obj
def init_db(cfg):
    """Create the tables and seed the configured categories."""
    init_database(cfg['db_path'])
    added = seed_categories(cfg['db_path'], cfg.get('categories', {}))
    click.echo(f"Initialized {cfg['db_path']} ({added} new categories).")


@main.command('add-user')
@click.argument('username')
@click.password_option('--password', help='Password for the new user')
@click.pass_obj
def add_user(cfg, username, password):
    """Register USERNAME for basic-auth sign in."""
    if get_user_by_username(cfg['db_path'], username) is not None:
        raise click.ClickException(f"User '{username}' already exists")
    user_id = create_user(cfg['db_path'], username, hash_password(password))
    click.echo(f"Created user {username} (id {user_id}).")


@main.command()
@click.option('--user', 'username', required=True, help='Owner of the transactions')
@click.option('--year', default=None, help='Calendar year (default: current year)')
@click.pass_obj
def cashflow(cfg, username, year):
    """Print the monthly income/expenses for a year and the year summary."""
    user = _resolve_user(cfg, username)
    year = parse_year(year)
    transactions = fetch_transactions(cfg['db_path'], user.id, year)
    buckets, _ = build_cashflow(transactions, list_categories(cfg['db_path']), year)
    view = present(buckets, year)

    click.echo(f"Cashflow {year}")
    click.echo(f"{'Month':<6}{'Income':>16}{'Expenses':>16}")
    for point in view.series:
        click.echo(f"{point.label:<6}{point.income_text:>16}{point.expenses_text:>16}")
    click.echo(f"Income:   {view.summary.income_text}")
    click.echo(f"Expenses: {view.summary.expenses_text}")
    click.echo(f"Balance:  {view.summary.balance_text}")


@main.command()
@click.option('--user', 'username', required=True, help='Owner of the transactions')
@click.option('--year', default=None, help='Calendar year (default: current year)')
@click.option(
    '--output', 'output_format',
    default='csv',
    type=click.Choice(['csv', 'excel']),
    help='Output target: csv or excel'
)
@click.option(
    '--output-dir', 'output_dir',
    default=None,
    type=click.Path(file_okay=False),
    help='Directory for exported files (overrides config)'
)
@click.pass_obj
def export(cfg, username, year, output_format, output_dir):
    """Export a year's transactions and cashflow."""
    user = _resolve_user(cfg, username)
    year = parse_year(year)
    if output_dir:
        cfg['output_dir'] = output_dir
    transactions = fetch_transactions(cfg['db_path'], user.id, year)
    outputter = get_output(output_format, cfg)
    path = outputter.write(year, transactions, list_categories(cfg['db_path']))
    click.echo(f"Exported {len(transactions)} transaction(s) to {path}.")


@main.command()
@click.option('--host', default='127.0.0.1', help='Host to bind (default: 127.0.0.1)')
@click.option('--port', default=8000, type=int, help='Port to bind (default: 8000)')
@click.pass_obj
def serve(cfg, host, port):
    """Run the web dashboard."""
    import uvicorn
    from webapp.main import create_app

    init_database(cfg['db_path'])
    click.echo(f"Coin Trail running at http://{host}:{port} (db: {cfg['db_path']})")
    uvicorn.run(create_app(cfg), host=host, port=port, log_level=str(cfg.get("log_level", "info")).lower())

# Overview: Flask CLI commands for local bootstrap.

# backend/agency/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <command> [options]
#
# - python -m flask db-init
#   Create any missing tables without Alembic (dev only; use `flask db upgrade` otherwise).
# - python -m flask db-init --drop --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask seed
#   Insert the owner list and upsert the material price list. Safe to rerun.

import click
from flask.cli import with_appcontext

from .extensions import db
from .services import seed_service


@click.command('db-init')
@click.option('--drop', is_flag=True, help='Drop all tables first')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def db_init(drop, yes):
    """Create database tables from the model metadata."""
    if drop:
        if not yes:
            click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)
        click.echo("DELETE  Dropping all tables...")
        db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()
    click.echo("PASS Tables ready. Run 'python -m flask seed' to load master data.")


@click.command('seed')
@with_appcontext
def seed():
    """Seed vehicle owners and material rates (idempotent)."""
    owners, materials = seed_service.seed_master_data(db.session)
    click.echo(f"PASS Seed complete: {owners} owners, {materials} materials")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(db_init)
    app.cli.add_command(seed)

"""Management script for database setup and office provisioning"""

import os

import click
from dotenv import load_dotenv
from flask.cli import FlaskGroup

load_dotenv()

from estatedesk import create_app
from estatedesk.extensions import db
from estatedesk.models import AdminOfficeAssignment, Office, User
from estatedesk.security.roles import Role
from estatedesk.services.subscription_service import SubscriptionService


def _create_app():
    return create_app(os.getenv("APP_ENV", "development"))


cli = FlaskGroup(create_app=_create_app)


def provision_office(name, manager_username, city=None):
    """Create an office with a TRIAL subscription and its manager user."""
    office = Office(name=name, city=city)
    db.session.add(office)
    SubscriptionService.provision_trial(office)
    db.session.add(User(
        office=office,
        username=manager_username,
        display_name=f"{name} manager",
        role=Role.MANAGER.value,
    ))
    return office


@cli.command("init-db")
def init_db():
    """Initialize the database"""
    db.create_all()
    click.echo("Database initialized successfully!")


@cli.command("drop-db")
@click.confirmation_option(prompt="Are you sure you want to drop all tables?")
def drop_db():
    """Drop all database tables"""
    db.drop_all()
    click.echo("Database dropped successfully!")


@cli.command("provision-office")
@click.argument("name")
@click.option("--manager", "manager_username", required=True, help="Manager username")
@click.option("--city", default=None)
def provision_office_command(name, manager_username, city):
    """Create an office with a 30-day trial and a manager account"""
    if User.query.filter_by(username=manager_username).first():
        raise click.ClickException(f"User '{manager_username}' already exists")

    office = provision_office(name, manager_username, city=city)
    db.session.commit()
    click.echo(f"Office created: {office.id}")


@cli.command("seed-db")
def seed_db():
    """Seed the database with demo offices and admin users"""
    if User.query.filter_by(username="superadmin").first():
        click.echo("Seed data already present. Skipping.")
        return

    offices = [
        provision_office("Tehran Central Realty", "tehran_manager", city="Tehran"),
        provision_office("Shiraz Homes", "shiraz_manager", city="Shiraz"),
        provision_office("Isfahan Estates", "isfahan_manager", city="Isfahan"),
    ]

    db.session.add(User(username="superadmin", display_name="Super Admin", role=Role.SUPER_ADMIN.value))
    mid_admin = User(username="midadmin", display_name="Regional Admin", role=Role.MID_ADMIN.value)
    db.session.add(mid_admin)
    db.session.flush()

    for office in offices[:2]:
        db.session.add(AdminOfficeAssignment(admin_user_id=mid_admin.id, office_id=office.id))

    db.session.commit()
    click.echo("Database seeded successfully!")


if __name__ == "__main__":
    cli()

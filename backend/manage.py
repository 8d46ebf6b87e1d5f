from attendance_app import create_app
from attendance_app.accounts import create_teacher, set_password
from attendance_app.errors import ConflictError
from attendance_app.extensions import db
from flask.cli import with_appcontext
from flask_migrate import upgrade, migrate, init
import click

app = create_app()

@app.cli.command("init-db")
@with_appcontext
def init_db():
    """Creates all tables that do not exist yet"""
    db.create_all()
    click.echo("Database tables created.")

@app.cli.command("db-init")
@with_appcontext
def db_init():
    """Initializes migrations directory"""
    init()

@app.cli.command("db-migrate")
@with_appcontext
def db_migrate():
    """Creates a new migration"""
    migrate()

@app.cli.command("db-upgrade")
@with_appcontext
def db_upgrade():
    """Applies migrations"""
    upgrade()

@app.cli.command("create-teacher")
@click.option("--email", default="admin@school.com", show_default=True)
@click.option("--name", default="Admin Teacher", show_default=True)
@click.option("--subject", default="Administration", show_default=True)
@click.password_option()
@with_appcontext
def create_teacher_command(email, name, subject, password):
    """Creates a teacher account that can log in to the dashboard"""
    try:
        create_teacher(name=name, email=email, password=password, subject=subject)
    except ConflictError:
        click.echo(f"A user with email {email} already exists. Use set-password to reset it.")
        return
    click.echo(f"Teacher {email} created.")

@app.cli.command("set-password")
@click.argument("email")
@click.password_option()
@with_appcontext
def set_password_command(email, password):
    """Replaces the password of an existing account"""
    if not set_password(email, password):
        raise click.ClickException(f"No user with email {email}")
    click.echo(f"Password updated for {email}.")

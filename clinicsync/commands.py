import click
from flask.cli import with_appcontext
from clinicsync.extensions import db
from clinicsync.models.user_models import User


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Create all tables."""
    db.create_all()
    click.echo("Database initialized successfully!")


@click.command('create-doctor')
@click.option('--name', required=True, help="Display name of the doctor.")
@click.option('--username', required=True, help="Login name, unique across users.")
@click.option('--doctor-id', 'doctor_id', required=True, help="Doctor identifier, unique across users.")
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@with_appcontext
def create_doctor_command(name, username, doctor_id, password):
    """Create a doctor account. There is no registration endpoint."""
    if User.find_by_username(username):
        raise click.ClickException(f"Username '{username}' already exists")
    if User.find_by_doctor_id(doctor_id):
        raise click.ClickException(f"Doctor ID '{doctor_id}' already exists")

    user = User(name=name, username=username, doctor_id=doctor_id)
    try:
        user.set_password(password)
    except ValueError as e:
        raise click.ClickException(str(e))

    db.session.add(user)
    db.session.commit()
    click.echo(f"Created doctor '{username}' ({doctor_id}) with id {user.id}")


def register_commands(app):
    app.cli.add_command(init_db_command)
    app.cli.add_command(create_doctor_command)

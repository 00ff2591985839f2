import sys

import click
from app.core.database import SessionLocal, Base, engine
from app.db.seed import ROLE_NAMES, seed_all
from app.models.user import User
from app.repositories.unit_of_work import UnitOfWork
import logging

logger = logging.getLogger(__name__)

@click.group()
def cli():
    """FitClass CLI commands"""
    pass

@cli.command()
@click.option('--demo/--no-demo', 'include_demo_data', default=None,
              help='Seed demo plans and classes (defaults to SEED_DEMO_DATA)')
def seed(include_demo_data):
    """Create tables and seed roles, plans and sample classes"""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_all(db, include_demo_data=include_demo_data)
        click.echo("✓ Database seeded")
    except Exception as e:
        db.rollback()
        logger.error(f"CLI error: {e}")
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)
    finally:
        db.close()

@cli.command()
@click.option('--email', required=False, help='User email')
@click.option('--id', 'user_id', required=False, help='User id (Firebase UID)')
@click.option('--grant', 'grant_role', required=False, type=click.Choice(ROLE_NAMES), help='Role to grant')
@click.option('--revoke', 'revoke_role', required=False, type=click.Choice(ROLE_NAMES), help='Role to revoke')
@click.option('--list', 'list_role', required=False, type=click.Choice(ROLE_NAMES), help='List users holding a role')
def role(email, user_id, grant_role, revoke_role, list_role):
    """Manage roles for users"""
    db = SessionLocal()
    uow = UnitOfWork(db)
    try:
        if list_role:
            holders = uow.users.query().filter(User.roles.any(name=list_role)).order_by(User.email).all()
            if not holders:
                click.echo(f"No users with role {list_role}")
            else:
                click.echo(f"\nFound {len(holders)} users with role {list_role}:\n")
                for user in holders:
                    click.echo(f"  - {user.email} (ID: {user.id})")
            return

        if not email and not user_id:
            click.echo("❌ Please provide --email or --id for this operation", err=True)
            sys.exit(1)

        user = uow.users.get_by_id(user_id) if user_id else uow.users.get_by_email(email)
        if not user:
            target = user_id or email
            click.echo(f"❌ User not found: {target}", err=True)
            sys.exit(1)

        if grant_role:
            if grant_role in user.role_names:
                click.echo(f"✓ User {user.email} already has role {grant_role}")
            else:
                role_row = uow.users.get_role(grant_role)
                if role_row is None:
                    click.echo(f"❌ Role {grant_role} does not exist. Run 'seed' first", err=True)
                    sys.exit(1)
                user.roles.append(role_row)
                uow.save_changes()
                click.echo(f"✓ Granted {grant_role} to {user.email}")
        elif revoke_role:
            matching = [r for r in user.roles if r.name == revoke_role]
            if not matching:
                click.echo(f"✓ User {user.email} does not have role {revoke_role}")
            else:
                for r in matching:
                    user.roles.remove(r)
                uow.save_changes()
                click.echo(f"✓ Revoked {revoke_role} from {user.email}")
        else:
            roles = ", ".join(sorted(user.role_names)) or "<none>"
            click.echo(f"User {user.email} roles: {roles}")
    except SystemExit:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"CLI error: {e}")
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)
    finally:
        db.close()

if __name__ == '__main__':
    cli()

import argparse
import sys
import os
from sqlmodel import Session, select

# Add current directory to path
sys.path.append(os.getcwd())

from jingjai.db.session import engine, init_db
from jingjai.models.user import User, UserRole
from jingjai.core.security import get_password_hash


def create_initial_user(email: str, password: str, full_name: str):
    print("--- Initial Admin Creation ---")
    init_db()

    with Session(engine) as session:
        user = session.exec(select(User).where(User.email == email)).first()

        if user:
            if UserRole.ADMIN not in user.roles:
                user.roles = list(user.roles) + [UserRole.ADMIN]
                session.add(user)
                session.commit()
                print(f"Granted admin role to existing user {email}.")
            else:
                print(f"User with email {email} is already an admin.")
            return

        print(f"Creating user {email}...")
        db_user = User(
            email=email,
            password=get_password_hash(password),
            full_name=full_name,
            roles=[UserRole.STAFF, UserRole.ADMIN]
        )
        session.add(db_user)
        session.commit()
        print("Initial admin created successfully!")
        print(f"Email: {email}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create (or promote) the first admin user.")
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("--name", default="Admin")
    args = parser.parse_args()
    create_initial_user(args.email, args.password, args.name)

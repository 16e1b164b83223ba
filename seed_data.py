import os

from dashboard import create_admin_user, create_app, db
from dashboard.models import Customer

DEMO_CUSTOMERS = [
    ("Delba de Oliveira", "delba@oliveira.com"),
    ("Lee Robinson", "lee@robinson.com"),
    ("Hector Simpson", "hector@simpson.com"),
    ("Steven Tey", "steven@tey.com"),
    ("Steph Dietz", "steph@dietz.com"),
    ("Michael Novotny", "michael@novotny.com"),
]


def seed_initial_data() -> None:
    """Seed the database with an admin user and demo customers."""
    app = create_app([])
    with app.app_context():
        create_admin_user()
        if os.getenv("SEED_CUSTOMERS", "1") != "0":
            for name, email in DEMO_CUSTOMERS:
                if Customer.query.filter_by(email=email).first() is None:
                    db.session.add(Customer(name=name, email=email))
        db.session.commit()
        print("Initial admin user and customers created.")


if __name__ == "__main__":
    seed_initial_data()

from flask import current_app

from ..extensions import db
from .admin import AdminConsole
from .auth import AdminAuthGate
from .identity import IdentityManager
from .store import SqlAlchemyStore
from .voting import VoteLedger

EXTENSION_KEY = "paperfair.services"


class Services:
    """The application's service objects, wired to one persistence gateway."""

    def __init__(self, store, config):
        self.store = store
        self.identity = IdentityManager(store, voter_email_domain=config["VOTER_EMAIL_DOMAIN"])
        self.votes = VoteLedger(store, self.identity, quota=config["VOTE_QUOTA"])
        self.auth = AdminAuthGate(
            store,
            admin_email=config["ADMIN_LOGIN_EMAIL"],
            admin_password=config["ADMIN_LOGIN_PASSWORD"],
            account_domain=config["ADMIN_ACCOUNT_DOMAIN"],
        )
        self.admin = AdminConsole(store, self.votes)


def init_services(app) -> Services:
    services = Services(SqlAlchemyStore(db.session), app.config)
    app.extensions[EXTENSION_KEY] = services
    return services


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]

from fastapi import Request

from app.services.mailer import Mailer
from shared.config import LinksConfig


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


def get_links_config(request: Request) -> LinksConfig:
    return request.app.state.config.links

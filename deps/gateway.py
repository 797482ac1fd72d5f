from fastapi import Request

from gateway import ModelGateway


def get_gateway(request: Request) -> ModelGateway:
    """
    The app-wide gateway created in main.py. Tests swap it out through
    app.dependency_overrides[get_gateway].
    """
    return request.app.state.gateway

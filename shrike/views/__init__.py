from shrike.views.webhook import WebhookGateway, gateway

__all__ = ["WebhookGateway", "gateway"]

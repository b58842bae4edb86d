"""Message bodies shared by the notifier adapters."""

from dataclasses import dataclass

CREDENTIALS_SUBJECT = "Guest Wi-Fi access"
APPROVAL_SUBJECT = "[Request] Corporate Wi-Fi access"


@dataclass(frozen=True)
class Message:
    recipient: str
    subject: str
    body: str


def credentials_message(email: str, secret: str, valid_for_days: int, ssid: str) -> Message:
    body = (
        "Hello,\n\n"
        "Thank you for registering. You may access the Wi-Fi by using "
        "the information below.\n\n"
        f"SSID: {ssid}\n"
        f"Username: {email}\n"
        f"Password: {secret}\n\n"
        f"You can use the Wi-Fi for up to {valid_for_days} days. It will expire after that, "
        "and you will need to register again from the website.\n\n"
        "We hope you enjoy your stay with us."
    )
    return Message(recipient=email, subject=CREDENTIALS_SUBJECT, body=body)


def approval_message(admin: str, requester: str, approval_link: str) -> Message:
    body = (
        "Hello,\n\n"
        "The following user is requesting access to the corporate Wi-Fi.\n\n"
        f"Email: {requester}\n\n"
        f"Click this link to approve the request: {approval_link}\n\n"
        "Thank you."
    )
    return Message(recipient=admin, subject=APPROVAL_SUBJECT, body=body)

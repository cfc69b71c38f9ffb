from flask_mail import Message

from livewithdesigns.extensions import mail


def send_email(subject, recipients, body, reply_to=None):
    """Plain-text UTF-8 mail from MAIL_DEFAULT_SENDER. `reply_to` routes answers to a person instead."""
    if isinstance(recipients, str):
        recipients = [recipients]

    msg = Message(
        subject=subject or "",
        recipients=list(recipients or []),
        body=body or "",
        reply_to=reply_to,
    )
    msg.charset = "utf-8"
    mail.send(msg)
    return msg

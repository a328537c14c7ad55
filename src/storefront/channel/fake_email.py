"""In-memory email transport that keeps every delivered message in an outbox."""

from uuid import uuid4

from storefront.channel.email_port import EmailMessage, EmailPort, Receipt


class FakeEmailAdapter(EmailPort):
    def __init__(self, fail_with: str | None = None):
        self.outbox: list[EmailMessage] = []
        self.fail_with = fail_with

    def send(self, message: EmailMessage) -> Receipt:
        if self.fail_with is not None:
            return Receipt(delivered=False, error=self.fail_with)

        self.outbox.append(message)
        return Receipt(delivered=True, message_id=f"mail-{uuid4().hex[:12]}")

    def sent_to(self, address: str) -> list[EmailMessage]:
        return [message for message in self.outbox if message.to == address]

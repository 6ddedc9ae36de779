from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType
from starlette.datastructures import UploadFile

from server.core.config.general_config import SERVER_DIR, Settings

EMAIL_TEMPLATE_FOLDER = SERVER_DIR / "templates" / "email"

Attachment = Union[UploadFile, dict, str]


def _as_list(value: Union[str, Iterable[str], None]) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def _as_attachments(attachments: Optional[Sequence[Union[Attachment, Path]]]) -> List[Attachment]:
    return [str(a) if isinstance(a, Path) else a for a in attachments or []]


class EmailSendService:
    """
    Thin wrapper around FastMail for template-based HTML emails.
    """

    def __init__(self, config: ConnectionConfig):
        self._fm = FastMail(config)

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmailSendService":
        """
        Build the service from the MAIL_* settings. Templates are read from
        the bundled `templates/email` folder.
        """
        conf = ConnectionConfig(
            MAIL_USERNAME=settings.MAIL_USERNAME,
            MAIL_PASSWORD=settings.MAIL_PASSWORD,
            MAIL_FROM=settings.MAIL_FROM,
            MAIL_PORT=settings.MAIL_PORT,
            MAIL_SERVER=settings.MAIL_SERVER,
            MAIL_FROM_NAME=settings.MAIL_FROM_NAME,
            MAIL_STARTTLS=settings.MAIL_STARTTLS,
            MAIL_SSL_TLS=settings.MAIL_SSL_TLS,
            USE_CREDENTIALS=bool(settings.MAIL_USERNAME),
            VALIDATE_CERTS=True,
            SUPPRESS_SEND=settings.MAIL_SUPPRESS_SEND,
            TEMPLATE_FOLDER=EMAIL_TEMPLATE_FOLDER,
        )
        return cls(conf)

    async def send_template(
        self,
        subject: str,
        recipients: Union[str, Sequence[str]],
        template_name: str,
        context: dict,
        *,
        reply_to: Optional[str] = None,
        attachments: Optional[Sequence[Union[Attachment, Path]]] = None,
    ) -> None:
        """
        Send an email rendered from a Jinja2 template in `templates/email`.
        """
        msg = MessageSchema(
            subject=subject,
            recipients=_as_list(recipients),
            template_body=context,
            subtype=MessageType.html,
            reply_to=_as_list(reply_to),
            attachments=_as_attachments(attachments),
        )
        await self._fm.send_message(msg, template_name=template_name)

"""
QR code generation for invitation links
"""

import io
import qrcode

from rsvp.core.config import settings

class QRService:
    """Service for generating invitation QR codes"""

    @staticmethod
    def get_invitation_url(invitation_code: str) -> str:
        """URL of the invitation landing page for a group"""
        return f"{settings.BASE_URL}/invitation?code={invitation_code}"

    @staticmethod
    def generate_invitation_qr(invitation_code: str, format: str = 'PNG') -> bytes:
        """PNG QR code pointing at a group's invitation page.

        The image embeds the invitation code, so it is only ever served to admins.
        """
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=4,
        )
        qr.add_data(QRService.get_invitation_url(invitation_code))
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        img.save(buffer, format=format)

        return buffer.getvalue()

"""
QR code generation service
"""

import io
import qrcode

class QRService:
    """Service for generating QR codes"""

    @staticmethod
    def generate_qr(data: str, format: str = 'PNG') -> bytes:
        """Render ``data`` (a check-in URL or a scancode) as a QR image"""
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=4,
        )
        qr.add_data(data)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        img.save(buffer, format=format)

        return buffer.getvalue()

"""
Challenge image rendering.

Draws a challenge answer as a distorted PNG with the ``captcha`` library,
so the guest's browser can show it next to the registration form.
"""

from captcha.image import ImageCaptcha


class ChallengeImageRenderer:
    """Renders challenge answers as PNG images."""

    def __init__(self, width: int = 240, height: int = 80) -> None:
        self._captcha = ImageCaptcha(width=width, height=height)

    def render(self, answer: str) -> bytes:
        return self._captcha.generate(answer, format="png").getvalue()

"""Sandboxed iframe markup for inscription previews."""

from __future__ import annotations

from dataclasses import dataclass

from ordwallet.bitcoin import InscriptionId


@dataclass(frozen=True)
class Iframe:
    """An inscription preview iframe, optionally wrapped in a link."""

    inscription_id: InscriptionId
    linked: bool = False

    @staticmethod
    def thumbnail(inscription_id: InscriptionId) -> Iframe:
        return Iframe(inscription_id, linked=True)

    @staticmethod
    def main(inscription_id: InscriptionId) -> Iframe:
        return Iframe(inscription_id, linked=False)

    def __str__(self) -> str:
        frame = (
            "<iframe sandbox=allow-scripts scrolling=no loading=lazy "
            f"src=/preview/{self.inscription_id}></iframe>"
        )
        if self.linked:
            return f"<a href=/inscription/{self.inscription_id}>{frame}</a>"
        return frame
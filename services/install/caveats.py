"""Post-install guidance shown after a successful installation."""

from __future__ import annotations

from services.install.constants import BINARY_NAME, HOMEPAGE_URL

__all__ = ["render_caveats"]


def render_caveats(binary_name: str = BINARY_NAME, homepage: str = HOMEPAGE_URL) -> str:
    return (
        f"To get started with {binary_name}:\n"
        "\n"
        "1. Initialize a tracker in your project:\n"
        f"     {binary_name} init\n"
        "\n"
        "2. Create your first issue:\n"
        f'     {binary_name} create "My first issue"\n'
        "\n"
        "3. View your issues:\n"
        f"     {binary_name} list\n"
        "\n"
        "For more information, visit:\n"
        f"     {homepage}\n"
    )

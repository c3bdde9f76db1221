from __future__ import annotations

from xml.sax.saxutils import escape

from blueprint_api.blueprints.schemas import Blueprint

SVG_WIDTH = 1000
SVG_HEIGHT = 800
LABEL_OFFSET_X = 10.0
LABEL_OFFSET_Y = 20.0


def _fmt(value: float) -> str:
    # Whole numbers render without a trailing ".0" (e.g. x="10").
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def render_blueprint_svg(blueprint: Blueprint) -> str:
    """Render each room as an outlined rectangle with its name in the top-left corner."""

    parts = [f'<svg width="{SVG_WIDTH}" height="{SVG_HEIGHT}" xmlns="http://www.w3.org/2000/svg">']
    for room in blueprint.rooms:
        parts.append(
            f'<rect x="{_fmt(room.x)}" y="{_fmt(room.y)}" '
            f'width="{_fmt(room.width)}" height="{_fmt(room.height)}" '
            'fill="none" stroke="black" stroke-width="2"/>'
        )
        parts.append(
            f'<text x="{_fmt(room.x + LABEL_OFFSET_X)}" y="{_fmt(room.y + LABEL_OFFSET_Y)}" '
            f'font-size="14">{escape(room.name)}</text>'
        )
    parts.append("</svg>")
    return "".join(parts)

"""
SVG Syringe Visualization
Renders an insulin syringe graphic with fill level and dose indicator
"""

from __future__ import annotations

from jinja2 import Environment
from markupsafe import Markup, escape

from calculator import format_number

# Layout (SVG user units)
WIDTH = 340
HEIGHT = 100
BARREL_LENGTH = 240
BARREL_HEIGHT = 32
BARREL_X = 50
BARREL_Y = 20

_env = Environment(autoescape=True, trim_blocks=True, lstrip_blocks=True)

_TICKS_TEMPLATE = _env.from_string(
    """{% for tick in ticks %}
<line x1="{{ tick.x }}" y1="{{ y }}" x2="{{ tick.x }}" y2="{{ y + tick.height }}" stroke="#4B5563" stroke-width="{{ tick.stroke }}"/>
{% if tick.label is not none %}
<text x="{{ tick.x }}" y="{{ y + 22 }}" text-anchor="middle" fill="#374151" font-size="11" font-weight="500" font-family="system-ui, sans-serif">{{ tick.label }}</text>
{% endif %}
{% endfor %}"""
)

_SVG_TEMPLATE = _env.from_string(
    """<svg viewBox="0 0 {{ width }} {{ height }}" class="syringe-svg w-full" role="img" aria-label="Syringe showing {{ target_units }} units">
<defs>
<linearGradient id="liquidFill" x1="0%" y1="0%" x2="0%" y2="100%">
<stop offset="0%" style="stop-color:#93C5FD;stop-opacity:0.95" />
<stop offset="50%" style="stop-color:#3B82F6;stop-opacity:1" />
<stop offset="100%" style="stop-color:#1D4ED8;stop-opacity:0.95" />
</linearGradient>
<linearGradient id="warningFill" x1="0%" y1="0%" x2="0%" y2="100%">
<stop offset="0%" style="stop-color:#FCA5A5;stop-opacity:0.95" />
<stop offset="50%" style="stop-color:#EF4444;stop-opacity:1" />
<stop offset="100%" style="stop-color:#DC2626;stop-opacity:0.95" />
</linearGradient>
<linearGradient id="barrelGradient" x1="0%" y1="0%" x2="0%" y2="100%">
<stop offset="0%" style="stop-color:#FFFFFF" />
<stop offset="30%" style="stop-color:#F9FAFB" />
<stop offset="70%" style="stop-color:#F3F4F6" />
<stop offset="100%" style="stop-color:#E5E7EB" />
</linearGradient>
<linearGradient id="plungerGradient" x1="0%" y1="0%" x2="0%" y2="100%">
<stop offset="0%" style="stop-color:#9CA3AF" />
<stop offset="50%" style="stop-color:#6B7280" />
<stop offset="100%" style="stop-color:#4B5563" />
</linearGradient>
</defs>
<rect x="2" y="{{ by + 6 }}" width="8" height="20" rx="2" fill="#4B5563"/>
<rect x="10" y="{{ by + 10 }}" width="40" height="12" rx="2" fill="url(#plungerGradient)"/>
<rect x="{{ bx }}" y="{{ by }}" width="{{ length }}" height="{{ bh }}" rx="4" fill="url(#barrelGradient)" stroke="#D1D5DB" stroke-width="1.5"/>
<rect x="{{ bx + 2 }}" y="{{ by + 2 }}" width="{{ length - 4 }}" height="8" rx="2" fill="rgba(255,255,255,0.6)"/>
{% if clamped_fill > 0 %}
<rect x="{{ bx + 3 }}" y="{{ by + 3 }}" width="{{ liquid_width }}" height="{{ bh - 6 }}" rx="2" fill="url(#{{ 'warningFill' if exceeds else 'liquidFill' }})" class="liquid-fill"/>
{% endif %}
<polygon points="{{ bx + length }},{{ by + 6 }} {{ bx + length + 20 }},{{ by + 14 }} {{ bx + length + 20 }},{{ by + 18 }} {{ bx + length }},{{ by + 26 }}" fill="#E5E7EB" stroke="#9CA3AF" stroke-width="1"/>
<line x1="{{ bx + length + 20 }}" y1="{{ by + 16 }}" x2="{{ width - 5 }}" y2="{{ by + 16 }}" stroke="#9CA3AF" stroke-width="2" stroke-linecap="round"/>
<line x1="{{ width - 8 }}" y1="{{ by + 16 }}" x2="{{ width }}" y2="{{ by + 16 }}" stroke="#6B7280" stroke-width="1.5" stroke-linecap="round"/>
{{ ticks }}
{% if clamped_fill > 0 and target_units > 0 %}
<line x1="{{ indicator_x }}" y1="{{ by - 8 }}" x2="{{ indicator_x }}" y2="{{ by + bh + 12 }}" stroke="#DC2626" stroke-width="2.5" stroke-linecap="round" class="dose-indicator"/>
<polygon points="{{ indicator_x - 6 }},{{ by - 8 }} {{ indicator_x + 6 }},{{ by - 8 }} {{ indicator_x }},{{ by - 2 }}" fill="#DC2626"/>
{% endif %}
</svg>"""
)


def generate_tick_marks(total_units: int, major_interval: int) -> Markup:
    """Tick marks below the barrel, one per unit, labelled on major ticks"""
    unit_width = BARREL_LENGTH / total_units
    ticks = []
    for i in range(total_units + 1):
        is_major = i % major_interval == 0
        ticks.append({
            "x": BARREL_X + i * unit_width,
            "height": 10 if is_major else 5,
            "stroke": 1.5 if is_major else 0.75,
            "label": i if is_major else None,
        })
    return Markup(_TICKS_TEMPLATE.render(ticks=ticks, y=BARREL_Y + BARREL_HEIGHT))


def generate_syringe_svg(
    syringe_type: str,
    fill_percentage: float,
    target_units: float,
    exceeds_syringe: bool = False
) -> str:
    """
    Generate the complete SVG syringe

    Args:
        syringe_type: "0.5" or "1.0"
        fill_percentage: Percentage of the barrel filled (values above 100 mark overflow)
        target_units: Units to draw, used for the dose indicator
        exceeds_syringe: Draw overflows the barrel (a draw's fill arrives clamped at 100)

    Returns:
        SVG markup
    """
    is_half_ml = syringe_type == "0.5"
    total_units = 50 if is_half_ml else 100
    major_tick_interval = 5 if is_half_ml else 10

    fill_percentage = fill_percentage or 0
    target_units = target_units or 0

    clamped_fill = min(max(fill_percentage, 0), 100)
    fill_width = clamped_fill / 100 * BARREL_LENGTH

    return _SVG_TEMPLATE.render(
        width=WIDTH,
        height=HEIGHT,
        bx=BARREL_X,
        by=BARREL_Y,
        length=BARREL_LENGTH,
        bh=BARREL_HEIGHT,
        clamped_fill=clamped_fill,
        liquid_width=max(0, fill_width - 6),
        exceeds=exceeds_syringe or fill_percentage > 100,
        indicator_x=BARREL_X + fill_width,
        target_units=target_units,
        ticks=generate_tick_marks(total_units, major_tick_interval),
    )


def generate_syringe_label(units: float, ml: float, exceeds_syringe: bool) -> str:
    """Short HTML label describing the draw"""
    if exceeds_syringe:
        return '<span class="text-red-600 font-bold">Exceeds syringe capacity!</span>'
    if not units or units <= 0:
        return '<span class="text-gray-400">Enter values to calculate</span>'
    return (
        f'Draw to <span class="font-bold text-blue-600">{escape(format_number(units))} units</span> '
        f'<span class="text-gray-500">({escape(format_number(ml))} mL)</span>'
    )

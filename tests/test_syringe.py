"""
Tests for the syringe SVG and draw label.
"""

from syringe import generate_syringe_label, generate_syringe_svg


class TestSyringeSvg:

    def test_dimensions(self):
        svg = generate_syringe_svg("1.0", 50, 50)
        assert svg.startswith("<svg")
        assert 'viewBox="0 0 340 100"' in svg
        assert svg.rstrip().endswith("</svg>")

    def test_full_ml_barrel_labels_every_ten_units(self):
        svg = generate_syringe_svg("1.0", 0, 0)
        assert svg.count("<text") == 11
        assert ">100</text>" in svg

    def test_half_ml_barrel_labels_every_five_units(self):
        svg = generate_syringe_svg("0.5", 0, 0)
        assert svg.count("<text") == 11
        assert ">50</text>" in svg
        assert ">100</text>" not in svg

    def test_one_tick_per_unit(self):
        # ticks plus the two needle lines
        assert generate_syringe_svg("0.5", 0, 0).count("<line ") == 51 + 2
        assert generate_syringe_svg("1.0", 0, 0).count("<line ") == 101 + 2

    def test_empty_syringe_has_no_fill_or_indicator(self):
        svg = generate_syringe_svg("1.0", 0, 0)
        assert "liquid-fill" not in svg
        assert "dose-indicator" not in svg

    def test_fill_and_indicator(self):
        svg = generate_syringe_svg("1.0", 50, 50)
        # 50% of the 240 wide barrel, less the 6 unit inset
        assert 'width="114.0"' in svg
        assert "url(#liquidFill)" in svg
        assert 'class="dose-indicator"' in svg
        assert 'x1="170.0"' in svg

    def test_overflow_uses_warning_fill(self):
        assert "url(#warningFill)" in generate_syringe_svg("1.0", 150, 150)
        assert "url(#warningFill)" in generate_syringe_svg("1.0", 100, 240, exceeds_syringe=True)
        assert "url(#warningFill)" not in generate_syringe_svg("1.0", 100, 100)

    def test_fill_clamped_to_barrel(self):
        svg = generate_syringe_svg("1.0", 400, 400)
        assert 'width="234.0"' in svg

    def test_missing_values_render_empty(self):
        svg = generate_syringe_svg("1.0", None, None)
        assert "liquid-fill" not in svg


class TestSyringeLabel:

    def test_draw_label(self):
        label = generate_syringe_label(50.0, 0.5, False)
        assert "Draw to" in label
        assert "50 units" in label
        assert "(0.5 mL)" in label

    def test_overflow_label(self):
        assert "Exceeds syringe capacity!" in generate_syringe_label(240.0, 2.4, True)

    def test_empty_label(self):
        assert "Enter values to calculate" in generate_syringe_label(0, 0, False)
        assert "Enter values to calculate" in generate_syringe_label(None, None, False)

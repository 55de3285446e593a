"""Tests for config.py: validation, the cumulative dispatch table, env loading."""

import pytest

from kandinsky.config import ELEMENT_CAP, CompositionConfig, map_range


class TestMapRange:
    def test_linear(self):
        assert map_range(5, 0, 10, 0, 100) == 50

    def test_clamped_descending(self):
        assert map_range(200, 3, 100, 1.2, 0.5, clamp=True) == 0.5
        assert map_range(0, 3, 100, 1.2, 0.5, clamp=True) == 1.2


class TestValidation:
    @pytest.mark.parametrize('field', ['line_steps', 'arc_steps', 'bezier_steps', 'spiral_steps'])
    def test_non_positive_steps(self, field):
        with pytest.raises(ValueError):
            CompositionConfig(**{field: 0})

    def test_unknown_policy(self):
        with pytest.raises(ValueError):
            CompositionConfig(cap_policy='forever')

    def test_weights_above_one(self):
        with pytest.raises(ValueError):
            CompositionConfig(dispatch_weights=(('line', 0.8), ('arc', 0.5)))

    def test_overrides_are_validated(self):
        with pytest.raises(ValueError):
            CompositionConfig().with_overrides(background_mode='oil')


class TestDispatchTable:
    def test_cumulative(self):
        table = CompositionConfig().dispatch_table()
        assert [kind for _, kind in table] == ['line', 'arc', 'bezier', 'lattice', 'spiral']
        assert [round(cutoff, 2) for cutoff, _ in table] == [0.35, 0.45, 0.5, 0.55, 0.6]


class TestFromEnv:
    def test_defaults(self):
        assert CompositionConfig.from_env({}) == CompositionConfig()

    def test_element_policy_picks_element_cap(self):
        config = CompositionConfig.from_env({'KANDINSKY_CAP_POLICY': 'elements'})
        assert config.cap_policy == 'elements'
        assert config.cap_value == ELEMENT_CAP

    def test_explicit_values(self):
        config = CompositionConfig.from_env({
            'KANDINSKY_CAP_VALUE': '7',
            'KANDINSKY_BACKGROUND_MODE': 'noise',
            'KANDINSKY_SPLOTCH_LAYERS': '10',
        })
        assert (config.cap_value, config.background_mode, config.splotch_layers) == (7, 'noise', 10)
        assert config.cap_policy == 'drags'

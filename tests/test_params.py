# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

import io

import pytest

from palmsim import params
from palmsim.exceptions import ConfigurationError
from palmsim.io import yaml


SimulationParameters = params.SimulationParameters


class TestFromUi:
    def test_single_population(self):
        """params.SimulationParameters.from_ui: empty diff_2"""
        p = SimulationParameters.from_ui(None, "0.1", "", "50")
        assert p.diff_1 == pytest.approx(0.1)
        assert p.diff_2 == 0.
        assert p.population_ratio == 1.

    def test_two_populations(self):
        """params.SimulationParameters.from_ui: two populations"""
        p = SimulationParameters.from_ui(None, 0.5, "0.05", "30", "2000")
        assert p.diff_1 == pytest.approx(0.5)
        assert p.diff_2 == pytest.approx(0.05)
        assert p.population_ratio == pytest.approx(0.3)
        assert p.n_frames == 2000

    @pytest.mark.parametrize("d1", ["", "abc", None])
    def test_missing_diff_1(self, d1):
        """params.SimulationParameters.from_ui: non-numeric diff_1"""
        with pytest.raises(ConfigurationError) as e:
            SimulationParameters.from_ui(None, d1)
        assert "coefficient of diffusion #1" in str(e.value)
        assert e.value.parameter == "diff_1"

    def test_missing_fraction(self):
        """params.SimulationParameters.from_ui: diff_2 without fraction"""
        with pytest.raises(ConfigurationError) as e:
            SimulationParameters.from_ui(None, 0.1, 0.2)
        assert e.value.parameter == "population_ratio"

    def test_n_frames(self):
        """params.SimulationParameters.from_ui: n_frames"""
        base = SimulationParameters(n_frames=123)
        assert SimulationParameters.from_ui(base, 0.1).n_frames == 123
        assert SimulationParameters.from_ui(base, 0.1,
                                            n_frames="10").n_frames == 10
        with pytest.raises(ConfigurationError):
            SimulationParameters.from_ui(base, 0.1, n_frames="10.5")

    def test_mapping(self):
        """params.SimulationParameters.from_ui: settings from dict"""
        p = SimulationParameters.from_ui({"image_size": 64}, 0.1)
        assert p.image_size == 64
        with pytest.raises(ConfigurationError):
            SimulationParameters.from_ui({"foo": 1}, 0.1)


class TestValidate:
    def test_valid(self):
        """params.SimulationParameters.validate: valid parameters"""
        p = SimulationParameters(diff_1=0.1)
        assert p.validate() is p

    @pytest.mark.parametrize("repl", [
        {"diff_1": 0.}, {"diff_1": -1.}, {"diff_2": -0.1},
        {"acquisition_time": 0.}, {"mean_activation": -1},
        {"t_on": 0.}, {"population_ratio": 1.5},
        {"population_ratio": -0.1}, {"n_emitters": 2.5},
        {"n_frames": -1}, {"qy": 1.2}, {"pixel_size": float("nan")},
        {"max_blink": float("inf")}])
    def test_invalid(self, repl):
        """params.SimulationParameters.validate: invalid parameters"""
        p = SimulationParameters(diff_1=0.1)._replace(**repl)
        with pytest.raises(ConfigurationError):
            p.validate()

    def test_zero_counts(self):
        """params.SimulationParameters.validate: zero frames and emitters"""
        SimulationParameters(diff_1=0.1, n_frames=0, n_emitters=0).validate()


def test_in_frames():
    """params.SimulationParameters.in_frames"""
    p = SimulationParameters(acquisition_time=0.02)
    assert p.in_frames(0.5) == pytest.approx(25.)


class TestYaml:
    def test_dump_load(self):
        """params.SimulationParameters: YAML round trip"""
        p = SimulationParameters(diff_1=0.3, diff_2=0.01,
                                 population_ratio=0.4)
        buf = io.StringIO()
        yaml.safe_dump(p, buf)
        assert buf.getvalue().startswith("!SimulationParameters")
        buf.seek(0)
        assert yaml.safe_load(buf) == p

    def test_file(self, tmp_path):
        """params.save_parameters, params.load_parameters"""
        p = SimulationParameters(diff_1=0.3, n_frames=20)
        params.save_parameters(tmp_path / "p.yaml", p)
        assert params.load_parameters(tmp_path / "p.yaml") == p

    def test_load_plain_mapping(self, tmp_path):
        """params.load_parameters: plain mapping"""
        (tmp_path / "p.yaml").write_text("image_size: 64\nn_frames: 10\n")
        p = params.load_parameters(tmp_path / "p.yaml")
        assert p == SimulationParameters(image_size=64, n_frames=10)

    def test_load_empty(self, tmp_path):
        """params.load_parameters: empty file"""
        (tmp_path / "p.yaml").write_text("")
        assert params.load_parameters(tmp_path / "p.yaml") == \
            SimulationParameters()

    def test_load_unknown(self, tmp_path):
        """params.load_parameters: unknown parameter"""
        (tmp_path / "p.yaml").write_text("foo: 1\n")
        with pytest.raises(ConfigurationError):
            params.load_parameters(tmp_path / "p.yaml")

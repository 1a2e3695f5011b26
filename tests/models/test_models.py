import numpy as np
import pandas as pd
import pytest

from src.config import SmoothingConfig
from src.exceptions import InvalidParameter, MissingColumn
from src.models.formula import formula_variables, quote_column
from src.models.linear_model import LinearModel
from src.models.registry import MODEL_KINDS, build_model, model_factories
from src.models.smooth_model import SmoothModel, collapse_ties


class TestFormulaVariables:
    def test_simple(self):
        assert formula_variables("y ~ x") == ["y", "x"]

    def test_factor_and_interaction(self):
        assert formula_variables("y ~ x * C(group)") == ["y", "x", "group"]

    def test_functions_are_not_columns(self):
        assert formula_variables("np.log(y) ~ I(x ** 2) + z") == ["y", "x", "z"]

    def test_contrast_arguments_are_not_columns(self):
        assert formula_variables("y ~ C(g, Sum)") == ["y", "g"]
        assert formula_variables('y ~ x + C(g, Treatment(reference="b"))') == ["y", "x", "g"]
        assert formula_variables("y ~ C(g, levels=order)") == ["y", "g"]

    def test_stateful_transforms_are_not_columns(self):
        assert formula_variables("y ~ center(x) + standardize(z)") == ["y", "x", "z"]

    def test_quoted_names(self):
        assert formula_variables('y ~ Q("Speed (mph)")') == ["y", "Speed (mph)"]

    def test_rhs_only(self):
        assert formula_variables("y ~ x + C(g)", side="rhs") == ["x", "g"]

    def test_quote_column(self):
        assert quote_column("x") == "x"
        assert quote_column("Speed (mph)") == 'Q("Speed (mph)")'


class TestLinearModel:
    def test_recovers_coefficients(self, linear_frame):
        model = LinearModel("y ~ x").fit(linear_frame)

        assert model.params["Intercept"] == pytest.approx(2.0, abs=0.3)
        assert model.params["x"] == pytest.approx(3.0, abs=0.5)

    def test_predict_shape(self, linear_frame):
        model = LinearModel("y ~ x").fit(linear_frame)
        pred = model.predict(linear_frame.head(7))

        assert pred.shape == (7,)
        assert pred.dtype == np.float64

    def test_predict_without_response_column(self, linear_frame):
        model = LinearModel("y ~ x").fit(linear_frame)

        pred = model.predict(pd.DataFrame({"x": [0.0, 1.0]}))

        assert pred[1] > pred[0]

    def test_factor_terms(self, small_frame):
        model = LinearModel("y ~ x + C(group)").fit(small_frame)

        assert any(name.startswith("C(group)") for name in model.params.index)

    def test_sum_contrast_factor(self, small_frame):
        model = LinearModel("y ~ x + C(group, Sum)").fit(small_frame)

        assert any(name.startswith("C(group, Sum)") for name in model.params.index)

    def test_missing_column_on_fit(self, linear_frame):
        with pytest.raises(MissingColumn) as exc_info:
            LinearModel("y ~ x + z").fit(linear_frame)

        assert exc_info.value.columns == ["z"]

    def test_missing_column_on_predict(self, linear_frame):
        model = LinearModel("y ~ x").fit(linear_frame)

        with pytest.raises(MissingColumn):
            model.predict(pd.DataFrame({"other": [1.0]}))

    def test_predict_before_fit(self):
        with pytest.raises(RuntimeError):
            LinearModel("y ~ x").predict(pd.DataFrame({"x": [1.0]}))


class TestSmoothModel:
    def test_collapse_ties(self):
        x = np.array([2.0, 1.0, 2.0, 3.0])
        y = np.array([4.0, 1.0, 6.0, 9.0])

        xu, yu, w = collapse_ties(x, y)

        np.testing.assert_array_equal(xu, [1.0, 2.0, 3.0])
        np.testing.assert_allclose(yu, [1.0, 5.0, 9.0])
        np.testing.assert_array_equal(w, [1.0, 2.0, 1.0])

    def test_tracks_nonlinear_signal(self, nonlinear_frame):
        smooth = SmoothModel("y", "x").fit(nonlinear_frame)
        linear = LinearModel("y ~ x").fit(nonlinear_frame)
        truth = 2.0 + 1.5 * np.sin(6.0 * nonlinear_frame["x"].to_numpy())

        smooth_err = np.mean((smooth.predict(nonlinear_frame) - truth) ** 2)
        linear_err = np.mean((linear.predict(nonlinear_frame) - truth) ** 2)

        assert smooth_err < linear_err

    def test_tiny_penalty_chases_training_points(self, linear_frame):
        wiggly = SmoothModel("y", "x", lam=1e-8).fit(linear_frame)
        smooth = SmoothModel("y", "x").fit(linear_frame)

        resid_wiggly = np.mean((wiggly.predict(linear_frame) - linear_frame["y"]) ** 2)
        resid_smooth = np.mean((smooth.predict(linear_frame) - linear_frame["y"]) ** 2)

        assert resid_wiggly < resid_smooth

    def test_handles_tied_predictor_values(self):
        frame = pd.DataFrame({"x": [1, 1, 2, 2, 3, 4, 5, 6], "y": [1, 2, 2, 3, 3, 4, 5, 6]})

        pred = SmoothModel("y", "x").fit(frame).predict(frame)

        assert np.all(np.isfinite(pred))

    def test_too_few_distinct_values(self):
        frame = pd.DataFrame({"x": [1, 1, 2, 2, 3, 4], "y": [1, 2, 3, 4, 5, 6]})

        with pytest.raises(InvalidParameter):
            SmoothModel("y", "x").fit(frame)

    def test_missing_column(self, linear_frame):
        with pytest.raises(MissingColumn):
            SmoothModel("dist", "x").fit(linear_frame)

    def test_negative_penalty(self):
        with pytest.raises(InvalidParameter):
            SmoothModel("y", "x", lam=-1.0)

    def test_predict_before_fit(self):
        with pytest.raises(RuntimeError):
            SmoothModel("y", "x").predict(pd.DataFrame({"x": [1.0]}))


class TestRegistry:
    def test_kinds(self):
        assert MODEL_KINDS == ("linear", "smooth", "wiggly")

    def test_build_each_kind(self):
        smoothing = SmoothingConfig(smooth_lam=0.5, wiggly_lam=1e-6)

        assert isinstance(build_model("linear", "y", "x"), LinearModel)
        assert build_model("smooth", "y", "x", smoothing).lam == 0.5
        assert build_model("WIGGLY", "y", "x", smoothing).lam == 1e-6

    def test_linear_quotes_awkward_names(self):
        model = build_model("linear", "stopping dist", "speed")

        assert model.formula == 'Q("stopping dist") ~ speed'

    def test_unknown_kind(self):
        with pytest.raises(InvalidParameter):
            build_model("loess", "y", "x")

    def test_factories_build_fresh_models(self):
        factories = model_factories(["linear", "smooth"], "y", "x")

        assert set(factories) == {"linear", "smooth"}
        assert factories["linear"]() is not factories["linear"]()

    def test_factories_validate_kinds(self):
        with pytest.raises(InvalidParameter):
            model_factories(["linear", "tree"], "y", "x")

import numpy as np
import pandas as pd
import pytest

from src.data.splitters import (
    ResampleView,
    generate_kfold_splits,
    generate_loo_splits,
    generate_splits,
)
from src.exceptions import InvalidParameter


class TestGenerateSplits:
    def test_returns_requested_number_of_splits(self, linear_frame):
        collection = generate_splits(linear_frame, num_splits=7, holdout_size_or_fraction=0.2)

        assert len(collection) == 7
        assert [s.split_id for s in collection] == list(range(7))
        assert collection.method == "mc"

    def test_train_and_test_are_disjoint_subsets(self, linear_frame):
        collection = generate_splits(linear_frame, 25, 0.3, random_seed=1)
        full = set(range(len(linear_frame)))

        for split in collection:
            train = set(split.train_indices.tolist())
            test = set(split.test_indices.tolist())
            assert train.isdisjoint(test)
            assert train | test <= full

    def test_80_20_sizes_for_100_rows(self, linear_frame):
        collection = generate_splits(linear_frame, 10, 0.2)

        for split in collection:
            assert split.n_train == 80
            assert split.n_test == 20
            assert len(np.union1d(split.train_indices, split.test_indices)) == 100

    def test_integer_holdout_is_a_row_count(self, linear_frame):
        collection = generate_splits(linear_frame, 3, 20)

        assert all(s.n_test == 20 and s.n_train == 80 for s in collection)

    def test_same_seed_reproduces_splits(self, linear_frame):
        a = generate_splits(linear_frame, 5, 0.2, random_seed=123)
        b = generate_splits(linear_frame, 5, 0.2, random_seed=123)

        for sa, sb in zip(a, b):
            np.testing.assert_array_equal(sa.train_indices, sb.train_indices)
            np.testing.assert_array_equal(sa.test_indices, sb.test_indices)

    def test_different_seed_changes_splits(self, linear_frame):
        a = generate_splits(linear_frame, 1, 0.2, random_seed=1)
        b = generate_splits(linear_frame, 1, 0.2, random_seed=2)

        assert not np.array_equal(a[0].test_indices, b[0].test_indices)

    def test_draws_are_independent_across_splits(self, linear_frame):
        collection = generate_splits(linear_frame, 10, 0.2, random_seed=0)
        distinct = {tuple(s.test_indices.tolist()) for s in collection}

        assert len(distinct) > 1

    def test_splits_share_one_dataset(self, linear_frame):
        collection = generate_splits(linear_frame, 4, 0.2)

        assert all(s.data is collection.data for s in collection)
        assert collection.data is not linear_frame

    def test_mutating_source_does_not_affect_splits(self, linear_frame):
        collection = generate_splits(linear_frame, 2, 0.2)
        before = collection[0].train.materialize()

        linear_frame.loc[:, "y"] = -999.0

        pd.testing.assert_frame_equal(collection[0].train.materialize(), before)

    def test_indices_are_read_only(self, linear_frame):
        split = generate_splits(linear_frame, 1, 0.2)[0]

        with pytest.raises(ValueError):
            split.train_indices[0] = 0

    def test_accepts_sequence_of_mappings(self):
        rows = [{"x": float(i), "y": 2.0 * i} for i in range(10)]
        collection = generate_splits(rows, 3, 0.3)

        assert collection.n_rows == 10
        assert all(s.n_test == 3 for s in collection)

    def test_non_default_index_is_reset(self, linear_frame):
        shuffled = linear_frame.sample(frac=1.0, random_state=0)
        collection = generate_splits(shuffled, 1, 0.2)

        assert list(collection.data.index) == list(range(100))
        assert collection.data["id"].tolist() == shuffled["id"].tolist()

    def test_to_frame_lists_sizes(self, linear_frame):
        table = generate_splits(linear_frame, 3, 0.2).to_frame()

        assert list(table.columns) == ["split_id", "n_train", "n_test"]
        assert table["n_test"].tolist() == [20, 20, 20]


class TestGenerateSplitsErrors:
    def test_empty_dataset(self):
        with pytest.raises(InvalidParameter):
            generate_splits(pd.DataFrame({"x": []}), 5, 0.2)

    def test_empty_sequence(self):
        with pytest.raises(InvalidParameter):
            generate_splits([], 5, 0.2)

    @pytest.mark.parametrize("holdout", [100, 150, 0, -5])
    def test_holdout_count_out_of_range(self, linear_frame, holdout):
        with pytest.raises(InvalidParameter):
            generate_splits(linear_frame, 5, holdout)

    @pytest.mark.parametrize("holdout", [0.0, 1.0, 1.5, -0.2])
    def test_holdout_fraction_out_of_range(self, linear_frame, holdout):
        with pytest.raises(InvalidParameter):
            generate_splits(linear_frame, 5, holdout)

    def test_fraction_rounding_to_empty_side(self, small_frame):
        with pytest.raises(InvalidParameter):
            generate_splits(small_frame, 1, 0.01)

    @pytest.mark.parametrize("num_splits", [0, -1])
    def test_num_splits_below_one(self, linear_frame, num_splits):
        with pytest.raises(InvalidParameter):
            generate_splits(linear_frame, num_splits, 0.2)

    def test_boolean_holdout_rejected(self, linear_frame):
        with pytest.raises(InvalidParameter):
            generate_splits(linear_frame, 1, True)

    def test_invalid_parameter_is_a_value_error(self, linear_frame):
        with pytest.raises(ValueError):
            generate_splits(linear_frame, 1, 2.0)


class TestViews:
    def test_materialize_returns_selected_rows(self, small_frame):
        split = generate_splits(small_frame, 1, 3, random_seed=4)[0]
        train_df, test_df = split.materialize()

        assert len(train_df) == 7
        assert len(test_df) == 3
        assert sorted(test_df["id"]) == sorted(split.test_indices.tolist())
        assert list(test_df.index) == [0, 1, 2]

    def test_view_length(self, small_frame):
        view = ResampleView(small_frame, np.array([1, 3, 5]))

        assert len(view) == 3
        assert view.materialize()["id"].tolist() == [1, 3, 5]

    def test_materialized_copy_is_independent(self, small_frame):
        split = generate_splits(small_frame, 1, 3)[0]
        train_df = split.train.materialize()
        train_df["y"] = 0.0

        assert (split.data["y"] != 0.0).any()


class TestKFoldAndLOO:
    def test_kfold_holds_out_every_row_once(self, linear_frame):
        collection = generate_kfold_splits(linear_frame, n_folds=5, random_seed=0)
        held_out = np.concatenate([s.test_indices for s in collection])

        assert len(collection) == 5
        assert collection.method == "kfold"
        assert sorted(held_out.tolist()) == list(range(100))

    def test_kfold_partitions(self, linear_frame):
        for split in generate_kfold_splits(linear_frame, n_folds=4):
            assert split.n_train + split.n_test == 100
            assert set(split.train_indices.tolist()).isdisjoint(split.test_indices.tolist())

    @pytest.mark.parametrize("n_folds", [1, 11, 2.5, "3", True])
    def test_kfold_invalid_folds(self, small_frame, n_folds):
        with pytest.raises(InvalidParameter):
            generate_kfold_splits(small_frame, n_folds=n_folds)

    def test_kfold_same_seed_reproduces(self, linear_frame):
        first = generate_kfold_splits(linear_frame, n_folds=5, random_seed=3)
        second = generate_kfold_splits(linear_frame, n_folds=5, random_seed=3)

        for a, b in zip(first, second):
            np.testing.assert_array_equal(a.train_indices, b.train_indices)
            np.testing.assert_array_equal(a.test_indices, b.test_indices)

    def test_kfold_seed_changes_folds(self, linear_frame):
        first = generate_kfold_splits(linear_frame, n_folds=5, random_seed=3)
        second = generate_kfold_splits(linear_frame, n_folds=5, random_seed=4)

        assert any(
            not np.array_equal(a.test_indices, b.test_indices)
            for a, b in zip(first, second)
        )

    def test_loo_one_split_per_row(self, small_frame):
        collection = generate_loo_splits(small_frame)

        assert len(collection) == 10
        assert all(s.n_test == 1 and s.n_train == 9 for s in collection)

    def test_loo_needs_two_rows(self):
        with pytest.raises(InvalidParameter):
            generate_loo_splits(pd.DataFrame({"x": [1.0]}))

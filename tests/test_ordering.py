from __future__ import annotations

import textwrap

import tomlkit

from fmt_toml.ordering import expected_package_order, format_package_section, sort_dependencies


def _dedent(text: str) -> str:
    return textwrap.dedent(text).lstrip()


def test_dependencies_sorted_alphabetically(reporter) -> None:
    doc = tomlkit.parse(
        _dedent(
            """
            [package]
            name = "demo"

            [dependencies]
            zebra = "1"
            alpha = "1"
            mango = "1"
            """
        )
    )
    assert sort_dependencies(doc, "dependencies", reporter) == 1
    assert doc.as_string() == _dedent(
        """
        [package]
        name = "demo"

        [dependencies]
        alpha = "1"
        mango = "1"
        zebra = "1"
        """
    )


def test_sorted_dependencies_report_no_change(reporter) -> None:
    source = _dedent(
        """
        [dev-dependencies]
        insta = "1"
        pretty_assertions = "1"
        """
    )
    doc = tomlkit.parse(source)
    assert sort_dependencies(doc, "dev-dependencies", reporter) == 0
    assert sort_dependencies(doc, "build-dependencies", reporter) == 0
    assert doc.as_string() == source


def test_comments_travel_with_their_keys(reporter) -> None:
    doc = tomlkit.parse(
        _dedent(
            """
            [dependencies]
            # web
            zebra = "1" # trailing
            # core
            alpha = "1"
            """
        )
    )
    sort_dependencies(doc, "dependencies", reporter)
    assert doc.as_string() == _dedent(
        """
        [dependencies]
        # core
        alpha = "1"
        # web
        zebra = "1" # trailing
        """
    )


def test_sort_keeps_header_entries_after_values(reporter) -> None:
    doc = tomlkit.parse(
        _dedent(
            """
            [dependencies]
            zlib = "1"
            alpha = "1"

            [dependencies.beta.sub]
            x = 1
            """
        )
    )
    assert sort_dependencies(doc, "dependencies", reporter) == 1
    out = doc.as_string()
    assert out.index('alpha = "1"') < out.index('zlib = "1"') < out.index("[dependencies.beta.sub]")
    assert tomlkit.parse(out)["dependencies"]["beta"]["sub"]["x"] == 1


def test_sort_is_byte_order(reporter) -> None:
    doc = tomlkit.parse(
        _dedent(
            """
            [dependencies]
            serde_json = "1"
            serde = "1"
            Serde-derive = "1"
            serde-value = "1"
            """
        )
    )
    sort_dependencies(doc, "dependencies", reporter)
    assert list(doc["dependencies"].keys()) == ["Serde-derive", "serde", "serde-value", "serde_json"]


def test_package_keys_in_canonical_order(reporter) -> None:
    doc = tomlkit.parse(
        _dedent(
            """
            [package]
            version = "0.1.0"
            name = "demo"
            """
        )
    )
    assert format_package_section(doc, reporter) == 1
    assert doc.as_string() == _dedent(
        """
        [package]
        name = "demo"
        version = "0.1.0"
        """
    )


def test_package_unknown_keys_follow_in_original_order(reporter) -> None:
    doc = tomlkit.parse(
        _dedent(
            """
            [package]
            license = "MIT"
            edition = "2021"
            publish = false
            name = "demo"
            version.workspace = true
            """
        )
    )
    assert format_package_section(doc, reporter) == 1
    assert list(doc["package"].keys()) == ["name", "version", "edition", "license", "publish"]


def test_package_custom_key_order(reporter) -> None:
    doc = tomlkit.parse('[package]\nname = "demo"\nedition = "2021"\n')
    assert format_package_section(doc, reporter, key_order=("edition", "name")) == 1
    assert list(doc["package"].keys()) == ["edition", "name"]


def test_missing_package_is_a_no_op(reporter) -> None:
    doc = tomlkit.parse('[dependencies]\nserde = "1"\n')
    assert format_package_section(doc, reporter) == 0


def test_expected_package_order() -> None:
    keys = ["readme", "foo", "name", "bar", "authors"]
    assert expected_package_order(keys) == ["name", "authors", "readme", "foo", "bar"]


def test_dotted_lines_of_one_dependency_sort_together(reporter) -> None:
    doc = tomlkit.parse(
        _dedent(
            """
            [dependencies]
            zeta.workspace = true
            serde.workspace = true
            serde.features = ["derive"]
            alpha = "1"
            """
        )
    )
    assert sort_dependencies(doc, "dependencies", reporter) == 1
    assert doc.as_string() == _dedent(
        """
        [dependencies]
        alpha = "1"
        serde.workspace = true
        serde.features = ["derive"]
        zeta.workspace = true
        """
    )
    assert doc["dependencies"]["serde"]["features"] == ["derive"]


def test_repeated_dotted_key_split_by_other_entries_is_left_alone(reporter) -> None:
    source = _dedent(
        """
        [dependencies]
        serde.workspace = true
        alpha = "1"
        serde.features = ["derive"]
        """
    )
    doc = tomlkit.parse(source)
    assert sort_dependencies(doc, "dependencies", reporter) == 0
    assert doc.as_string() == source

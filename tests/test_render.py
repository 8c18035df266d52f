from lintkit.render import js_literal, render_json, render_module


def test_identifier_keys_are_unquoted():
    assert js_literal({"root": True, "react/prop-types": "off"}) == "{\n  root: true,\n  'react/prop-types': 'off'\n}"


def test_short_scalar_arrays_stay_inline():
    assert js_literal({"eqeqeq": ["error", "smart"]}) == "{\n  eqeqeq: ['error', 'smart']\n}"


def test_long_arrays_wrap():
    items = ["x" * 60, "y" * 60]

    assert js_literal(items) == "[\n  '" + "x" * 60 + "',\n  '" + "y" * 60 + "'\n]"


def test_scalars():
    assert js_literal([True, False, None, 2021]) == "[true, false, null, 2021]"
    assert js_literal("it's") == "'it\\'s'"
    assert js_literal({}) == "{}"
    assert js_literal([]) == "[]"


def test_render_module_uses_format_options():
    assert render_module({"presets": ["@babel/preset-env"]}) == (
        "module.exports = {\n  presets: ['@babel/preset-env']\n};\n"
    )
    assert render_module({"a": "x"}, {"singleQuote": False, "tabWidth": 4}) == 'module.exports = {\n    a: "x"\n};\n'


def test_render_json():
    assert render_json({"a": 1, "b": ["c"]}) == '{\n  "a": 1,\n  "b": [\n    "c"\n  ]\n}\n'


def test_key_prefix_counts_toward_print_width():
    key = "k" * 30
    items = ["a" * 31, "b" * 31]

    # The array alone is 70 characters; with the indented key in front the line is 105.
    assert js_literal({key: items}) == "{\n  " + key + ": [\n    '" + "a" * 31 + "',\n    '" + "b" * 31 + "'\n  ]\n}"
    assert js_literal({"k": items}) == "{\n  k: ['" + "a" * 31 + "', '" + "b" * 31 + "']\n}"

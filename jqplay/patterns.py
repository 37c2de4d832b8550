"""Static catalog of jq snippets offered as completions."""

from .models import PatternEntry


def _entries(category: str, *rows: tuple) -> list:
    return [PatternEntry(name=name, snippet=snippet, description=description, category=category)
            for name, snippet, description in rows]


PATTERN_CATALOG = tuple(
    _entries(
        "Basic",
        ("Identity", ".", "Returns the input unchanged"),
        ("Array iteration", ".[]", "Iterate over array elements or object values"),
        ("Field access", ".fieldname", "Access a specific field"),
        ("Array slice", ".[0:3]", "Get array slice from index 0 to 3"),
        ("First item", "first", "Get first item from array"),
        ("Last item", "last", "Get last item from array"),
        ("Recursive descent", "..", "Recursively descend through the input, outputting each value"),
        ("Optional field", ".field?", "Access field if it exists, otherwise return null"),
    )
    + _entries(
        "Filtering",
        ("Filter by condition", '.[] | select(.field == "value")', "Filter items based on a condition"),
        ("String contains", '.[] | select(.field | contains("text"))', "Filter items where field contains text"),
        ("Type checking", '.[] | select(.field | type == "string")', "Filter by field type"),
        ("Empty filter", "empty", "Filter out empty values"),
        ("Not null", ".[] | select(. != null)", "Filter out null values"),
        ("Starts with", '.[] | select(.field | startswith("text"))', "Filter items where field starts with text"),
        ("Ends with", '.[] | select(.field | endswith("text"))', "Filter items where field ends with text"),
        ("Regex match", '.[] | select(.field | test("regex"))', "Filter items where field matches regex"),
        ("Greater than", ".[] | select(.field > value)", "Filter items where field is greater than value"),
        ("Less than", ".[] | select(.field < value)", "Filter items where field is less than value"),
    )
    + _entries(
        "Comparison",
        ("Equals", '.field == "value"', "True when the field equals the value"),
        ("Not equals", '.field != "value"', "True when the field differs from the value"),
        ("Greater or equal", ".field >= value", "True when the field is at least the value"),
        ("Less or equal", ".field <= value", "True when the field is at most the value"),
        ("And", "(.a == 1) and (.b == 2)", "Both conditions hold"),
        ("Or", "(.a == 1) or (.b == 2)", "Either condition holds"),
        ("Not", "not", "Negate a boolean"),
    )
    + _entries(
        "Transformation",
        ("Map to object", ".[] | {name, email}", "Transform each item to a new object with selected fields"),
        ("Flatten array", "flatten", "Flatten nested arrays"),
        ("Reverse array", "reverse", "Reverse array order"),
        ("To entries", "to_entries", "Convert object to key-value pairs"),
        ("From entries", "from_entries", "Convert key-value pairs to object"),
        ("Map values", "map(.field)", "Extract field from each array item"),
        ("Delete field", "del(.field)", "Delete a field from an object"),
        ("Add field", ". + {field: value}", "Add a field to an object"),
        ("Merge objects", "reduce inputs as $item ({}; . * $item)", "Merge multiple objects together"),
        ("Pick fields", "{field1, field2}", "Create a new object with only specified fields"),
        ("Walk", "walk(f)", "Apply f recursively to every component"),
    )
    + _entries(
        "Object",
        ("Object construction", "{key: .field}", "Build a new object from expressions"),
        ("Computed key", "{(.key): .value}", "Build an object whose key is computed"),
        ("With entries", "with_entries(.value |= tostring)", "Transform each key-value pair of an object"),
    )
    + _entries(
        "Value",
        ("String value", '"value"', "A string literal"),
        ("Number value", "0", "A number literal"),
        ("True", "true", "Boolean true"),
        ("False", "false", "Boolean false"),
        ("Null", "null", "The null value"),
    )
    + _entries(
        "Aggregation",
        ("Count items", "length", "Get the length of array or object"),
        ("Get unique values", "unique", "Remove duplicate values from array"),
        ("Min/Max value", "min_by(.field)", "Find item with minimum value for field"),
        ("Min value", "min", "Get minimum value from array"),
        ("Max value", "max", "Get maximum value from array"),
        ("Sum values", "add", "Sum array of numbers"),
        ("Average", "add / length", "Calculate average of array values"),
        ("Group count", "group_by(.field) | map({key: .[0].field, count: length})",
         "Count occurrences by field value"),
    )
    + _entries(
        "Sorting",
        ("Sort by field", "sort_by(.field)", "Sort array by a specific field"),
        ("Sort", "sort", "Sort array in ascending order"),
        ("Sort descending", "sort | reverse", "Sort array in descending order"),
    )
    + _entries(
        "Grouping",
        ("Group by field", "group_by(.field)", "Group array items by a field value"),
    )
    + _entries(
        "String",
        ("Split string", 'split(",")', "Split string by delimiter"),
        ("Join array", 'join(",")', "Join array elements with delimiter"),
        ("Lowercase", "ascii_downcase", "Convert string to lowercase"),
        ("Uppercase", "ascii_upcase", "Convert string to uppercase"),
        ("Trim left", 'ltrimstr("prefix")', "Remove prefix from string"),
        ("Trim right", 'rtrimstr("suffix")', "Remove suffix from string"),
        ("String replace", 'sub("pattern"; "replacement")', "Replace first occurrence of pattern"),
        ("String replace all", 'gsub("pattern"; "replacement")', "Replace all occurrences of pattern"),
        ("String format", '"\\(.field1) - \\(.field2)"', "Format string with interpolation"),
        ("Trim whitespace", "trim", "Remove leading and trailing whitespace"),
        ("String to codepoints", "explode", "Convert a string to an array of codepoints"),
        ("Codepoints to string", "implode", "Convert an array of codepoints to a string"),
    )
    + _entries(
        "Testing",
        ("Check if has key", 'has("key")', "Check if object has a specific key"),
        ("Inside", "inside(container)", "Check if input is contained in container"),
    )
    + _entries(
        "Introspection",
        ("Get object keys", "keys", "Get all keys of an object"),
        ("Get type", "type", "Get the type of a value"),
        ("Get path", "path(.field.nested)", "Get the path expression as an array"),
        ("Get value at path", 'getpath(["field", "nested"])', "Get value at a path given as an array"),
    )
    + _entries(
        "Math",
        ("Floor", "floor", "Round down to nearest integer"),
        ("Ceiling", "ceil", "Round up to nearest integer"),
        ("Round", "round", "Round to nearest integer"),
        ("Modulo", "% 10", "Get remainder of division"),
        ("Absolute value", "fabs", "Get absolute value"),
        ("Square root", "sqrt", "Calculate square root"),
    )
    + _entries(
        "Logic",
        ("If-then-else", "if .condition then .value1 else .value2 end", "Conditional expression"),
        ("Alternative", ".value1 // .value2", "Use second value if first is null or false"),
        ("Try-catch", "try .expression catch .default", "Handle errors gracefully"),
        ("Error", 'error("message")', "Raise an error"),
    )
    + _entries(
        "Array",
        ("Range", "range(0; 10)", "Generate a range of numbers"),
        ("Indices", "indices(element)", "Find all indices of element in array"),
        ("Reduce", "reduce .[] as $item (0; . + $item)", "Reduce array to a single value"),
        ("Foreach", "foreach .[] as $item ({}; . + {($item): true})", "Iterate with state"),
        ("Index", 'index("substring")', "Find first index of substring"),
        ("Transpose", "transpose", "Transpose a matrix"),
        ("Combinations", "combinations", "Generate all combinations of arrays"),
    )
    + _entries(
        "Variable",
        ("Variable assignment", ".items[] as $item | $item.name", "Bind a value to a variable"),
    )
    + _entries(
        "Function",
        ("Function definition", "def add(a; b): a + b; add(1; 2)", "Define a reusable function"),
        ("Pipe to function", ".field | tostring", "Pass a field value to a function"),
    )
    + _entries(
        "Conversion",
        ("To string", "tostring", "Convert value to string"),
        ("To number", "tonumber", "Convert string to number"),
        ("To JSON", "tojson", "Convert value to JSON string"),
        ("From JSON", "fromjson", "Parse JSON string"),
    )
    + _entries(
        "Date",
        ("ISO date to timestamp", "fromdateiso8601", "Convert ISO 8601 date to Unix timestamp"),
        ("Timestamp to ISO date", "todateiso8601", "Convert Unix timestamp to ISO 8601 date"),
        ("Current time", "now", "Get current Unix timestamp"),
        ("Parse date with format", 'strptime("%Y-%m-%d")', "Parse date string with format"),
        ("Format date with format", 'strftime("%Y-%m-%d")', "Format timestamp as date string"),
    )
    + _entries(
        "SQL",
        ("Index by key", "INDEX(stream; .key)", "Build an object keyed by an expression"),
        ("In", "IN(stream)", "Check whether input appears in a stream"),
    )
    + _entries(
        "IO",
        ("Read input", "input", "Read one input value"),
        ("Read all inputs", "inputs", "Read all remaining input values"),
        ("Debug", "debug", "Print the value to stderr as a debug message"),
        ("Print to stderr", "stderr", "Print the value to stderr without formatting"),
        ("Input filename", "input_filename", "Name of the file being read"),
    )
    + _entries(
        "Stream",
        ("To stream", "tostream", "Convert to streamed [path, leaf] form"),
        ("From stream", "fromstream(stream_expr)", "Rebuild values from streamed form"),
        ("Truncate stream", "truncate_stream(stream_expr)", "Drop leading path elements from a stream"),
    )
    + _entries(
        "Format",
        ("Format as CSV", "@csv", "Format array as CSV row"),
        ("Format as TSV", "@tsv", "Format array as TSV row"),
        ("Format as JSON", "@json", "Serialize value as JSON text"),
        ("Format as URI", "@uri", "Percent-encode a string"),
        ("Format as base64", "@base64", "Encode a string as base64"),
        ("Decode base64", "@base64d", "Decode a base64 string"),
    )
    + _entries(
        "Control",
        ("While loop", "while(condition; update)", "Repeat update while condition holds"),
        ("Until loop", "until(condition; next)", "Repeat next until condition holds"),
        ("Repeat", "repeat(expr)", "Apply expr repeatedly"),
    )
    + _entries(
        "Boolean",
        ("Any", "any", "True if any element is true"),
        ("All", "all", "True if all elements are true"),
        ("Any with condition", "any(condition)", "True if condition holds for any element"),
        ("All with condition", "all(condition)", "True if condition holds for every element"),
    )
    + _entries(
        "Utility",
        ("Is empty", "isempty(expr)", "Check if expression produces no output"),
        ("Limit", "limit(n; expr)", "Limit number of outputs"),
        ("First", "first(expr)", "Get first output of expression"),
        ("Last", "last(expr)", "Get last output of expression"),
        ("Nth", "nth(n; expr)", "Get nth output of expression"),
        ("Environment variables", "env", "Access environment variables"),
    )
)


def categories(catalog=PATTERN_CATALOG) -> list:
    """Category names in catalog order, without repeats."""
    seen = []
    for entry in catalog:
        if entry.category not in seen:
            seen.append(entry.category)
    return seen

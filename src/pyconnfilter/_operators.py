"""Filter operator mappings."""

# Operator name -> SQL comparison operator
COMPARISON_OPERATORS: dict[str, str] = {
    "equalTo": "=",
    "notEqualTo": "<>",
    "distinctFrom": "IS DISTINCT FROM",
    "notDistinctFrom": "IS NOT DISTINCT FROM",
    "lessThan": "<",
    "lessThanOrEqualTo": "<=",
    "greaterThan": ">",
    "greaterThanOrEqualTo": ">=",
}

# Array element operator name -> SQL operator applied with ANY(...)
ANY_OPERATORS: dict[str, str] = {
    "anyEqualTo": "=",
    "anyNotEqualTo": "<>",
    "anyLessThan": "<",
    "anyLessThanOrEqualTo": "<=",
    "anyGreaterThan": ">",
    "anyGreaterThanOrEqualTo": ">=",
}

# Array containment operator name -> SQL operator
ARRAY_OPERATORS: dict[str, str] = {
    "contains": "@>",
    "containedBy": "<@",
    "overlaps": "&&",
}

# JSONB operator name -> SQL operator
JSONB_OPERATORS: dict[str, str] = {
    "contains": "@>",
    "containedBy": "<@",
    "containsKey": "?",
    "containsAllKeys": "?&",
    "containsAnyKeys": "?|",
}

# Operator name -> (prefix wildcard, suffix wildcard, escape input, case insensitive, negate)
LIKE_OPERATORS: dict[str, tuple[str, str, bool, bool, bool]] = {
    "includes": ("%", "%", True, False, False),
    "notIncludes": ("%", "%", True, False, True),
    "includesInsensitive": ("%", "%", True, True, False),
    "notIncludesInsensitive": ("%", "%", True, True, True),
    "startsWith": ("", "%", True, False, False),
    "notStartsWith": ("", "%", True, False, True),
    "startsWithInsensitive": ("", "%", True, True, False),
    "notStartsWithInsensitive": ("", "%", True, True, True),
    "endsWith": ("%", "", True, False, False),
    "notEndsWith": ("%", "", True, False, True),
    "endsWithInsensitive": ("%", "", True, True, False),
    "notEndsWithInsensitive": ("%", "", True, True, True),
    "like": ("", "", False, False, False),
    "notLike": ("", "", False, False, True),
    "likeInsensitive": ("", "", False, True, False),
    "notLikeInsensitive": ("", "", False, True, True),
}

BASE_OPERATORS = (
    "isNull",
    "equalTo",
    "notEqualTo",
    "distinctFrom",
    "notDistinctFrom",
    "in",
    "notIn",
)

SORT_OPERATORS = (
    "lessThan",
    "lessThanOrEqualTo",
    "greaterThan",
    "greaterThanOrEqualTo",
)

LIST_OPERATORS = (
    "isNull",
    "equalTo",
    "notEqualTo",
    "distinctFrom",
    "notDistinctFrom",
    "contains",
    "containedBy",
    "overlaps",
    *ANY_OPERATORS,
)

OPERATOR_DESCRIPTIONS: dict[str, str] = {
    "isNull": "Is null (if `true` is specified) or is not null (if `false` is specified).",
    "equalTo": "Equal to the specified value.",
    "notEqualTo": "Not equal to the specified value.",
    "distinctFrom": "Not equal to the specified value, treating null like an ordinary value.",
    "notDistinctFrom": "Equal to the specified value, treating null like an ordinary value.",
    "in": "Included in the specified list.",
    "notIn": "Not included in the specified list.",
    "lessThan": "Less than the specified value.",
    "lessThanOrEqualTo": "Less than or equal to the specified value.",
    "greaterThan": "Greater than the specified value.",
    "greaterThanOrEqualTo": "Greater than or equal to the specified value.",
    "includes": "Contains the specified string (case-sensitive).",
    "notIncludes": "Does not contain the specified string (case-sensitive).",
    "includesInsensitive": "Contains the specified string (case-insensitive).",
    "notIncludesInsensitive": "Does not contain the specified string (case-insensitive).",
    "startsWith": "Starts with the specified string (case-sensitive).",
    "notStartsWith": "Does not start with the specified string (case-sensitive).",
    "startsWithInsensitive": "Starts with the specified string (case-insensitive).",
    "notStartsWithInsensitive": "Does not start with the specified string (case-insensitive).",
    "endsWith": "Ends with the specified string (case-sensitive).",
    "notEndsWith": "Does not end with the specified string (case-sensitive).",
    "endsWithInsensitive": "Ends with the specified string (case-insensitive).",
    "notEndsWithInsensitive": "Does not end with the specified string (case-insensitive).",
    "like": "Matches the specified pattern (case-sensitive).",
    "notLike": "Does not match the specified pattern (case-sensitive).",
    "likeInsensitive": "Matches the specified pattern (case-insensitive).",
    "notLikeInsensitive": "Does not match the specified pattern (case-insensitive).",
    "contains": "Contains the specified value.",
    "containedBy": "Contained by the specified value.",
    "overlaps": "Overlaps the specified list of values.",
    "containsKey": "Contains the specified key.",
    "containsAllKeys": "Contains all of the specified keys.",
    "containsAnyKeys": "Contains any of the specified keys.",
    "anyEqualTo": "Any array item is equal to the specified value.",
    "anyNotEqualTo": "Any array item is not equal to the specified value.",
    "anyLessThan": "Any array item is less than the specified value.",
    "anyLessThanOrEqualTo": "Any array item is less than or equal to the specified value.",
    "anyGreaterThan": "Any array item is greater than the specified value.",
    "anyGreaterThanOrEqualTo": "Any array item is greater than or equal to the specified value.",
}

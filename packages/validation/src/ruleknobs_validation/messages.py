"""Default error message templates, one per check family.

Templates are ``str.format`` strings; ``{field}`` is the property name and
the remaining placeholders are the check's operands.
"""

DEFAULT = "The {field} field is invalid."

NOT_NULL = "The {field} field cannot be null."
NULL = "The {field} field must be null."
NOT_EMPTY = "The {field} field cannot be empty."
EMPTY = "The {field} field must be empty."

MINIMUM_LENGTH = "The {field} field must be at least {length} characters long."
MAXIMUM_LENGTH = "The {field} field must be no longer than {length} characters."

MATCHES = "The {field} field is not in the correct format."
STARTS_WITH = "The {field} field must begin with '{prefix}'."
ENDS_WITH = "The {field} field must end with '{suffix}'."
MUST_CONTAIN = "The {field} field must contain '{substring}'."

EQUAL_TO = "The {field} field must be equal to '{other}'."
GREATER_THAN = "The {field} field must be greater than {threshold}."
LESS_THAN = "The {field} field must be less than {threshold}."
BETWEEN = "The {field} field must be between {minimum} and {maximum}."

POSITIVE = "The {field} field must be a positive number."
NEGATIVE = "The {field} field must be a negative number."
NOT_ZERO = "The {field} field must not be zero."

FUTURE_DATE = "The {field} field must be a future date."
PAST_DATE = "The {field} field must be a past date."
TODAY = "The {field} field must be today's date."

IN = "The {field} field must be in the list of allowed values."
HAS_COUNT = "The {field} field must contain exactly {count} items."
NOT_EMPTY_COLLECTION = "The {field} field must not be an empty collection."

ALPHA = "The {field} field must only contain alphabetic characters."
ALPHANUMERIC = "The {field} field must only contain alphanumeric characters."
NUMERIC = "The {field} field must only contain numbers."
EMAIL = "The {field} field must be a valid email address."
URL = "The {field} field must be a valid URL."

MUST = "The {field} field does not meet the specified condition."
MUST_ASYNC = "The field {field} does not meet the specified condition."
DEPENDENT = "The field {field} does not meet the dependent condition of {dependent}."

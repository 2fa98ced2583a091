# MathEngine.py
"""""
Core calculation engine for the String Calculator.

Pipeline
--------
1) Separator detection: decides whether '.' or ',' is the decimal separator of the call.
2) Preprocessor: strips whitespace, checks brackets and rejects degenerate input.
3) Evaluator: resolves brackets recursively and folds operands into an accumulator stack.
   '*' and '/' rewrite the top of the stack, '+' and '-' push new signed terms,
   so multiplication binds tighter than addition without a precedence table.
4) Formatter: renders the float in fixed or exponential notation using the
   separator found in step 1.
"""""

import logging
import math
import re

from . import error as E

logger = logging.getLogger(__name__)

# Supported operators (kept as a simple list for quick membership checks)
Operations = ["+", "-", "*", "/"]
DIGITS = "0123456789"

# Output policy
EXPONENTIAL_THRESHOLD = 10   # |x| >= 10^10 is shown as 1e+10
ZERO_THRESHOLD = 4           # |x| <= 10^-4 is shown as 1e-4
FIXED_DECIMALS = 10
DEFAULT_SEPARATOR = "."
MAX_NESTING_DEPTH = 100

# [sign](digits[sep[digits]] | sep digits)[exponent]
NUMBER_TEMPLATE = r"[+-]?([0-9]+({sep}[0-9]*)?|{sep}[0-9]+)([eE][+-]?[0-9]+)?"
SINGLE_NUMBER = re.compile(NUMBER_TEMPLATE.format(sep="[.,]"))


# -----------------------------
# Utilities / small helpers
# -----------------------------

def isOp(zahl):
    """Return index of a known operator or -1 if unknown."""
    try:
        return Operations.index(zahl)
    except ValueError:
        return -1


def isolate_bracket(problem, start):
    """Return the content of the bracket opened at `start` and the position after its ')'.

    Walks forward counting the bracket depth.
    Returns:
        (substring_without_brackets, position_after_closing_paren)
    """
    b = start + 1
    bracket_count = 1
    while bracket_count != 0 and b < len(problem):
        if problem[b] == '(':
            bracket_count += 1
        elif problem[b] == ')':
            bracket_count -= 1
        b += 1
    if bracket_count != 0:
        raise E.InvalidExpression("Missing ')'.", code="3002")
    return problem[start + 1:b - 1], b


def check_empty(problem):
    if not isinstance(problem, str) or not problem.strip():
        raise E.InvalidExpression("Empty expression", code="3000")


# -----------------------------
# Separator detection
# -----------------------------

def detect_separator(problem):
    """Return the decimal separator used by `problem`.

    Counts on the raw input. Mixing '.' and ',' is an error; without either
    the default separator is used.
    """
    dot_count = problem.count(".")
    comma_count = problem.count(",")

    if dot_count > 0 and comma_count > 0:
        raise E.InvalidExpression("Mixed decimal separators found", code="3001")

    if dot_count > 0:
        return "."
    if comma_count > 0:
        return ","
    return DEFAULT_SEPARATOR


# -----------------------------
# Preprocessor / validator
# -----------------------------

def preprocess(problem, max_depth=MAX_NESTING_DEPTH):
    """Strip whitespace and reject input that cannot be calculated.

    Whitespace only separates digits visually, so "1 2" becomes "12".
    Returns the normalized string.
    """
    check_empty(problem)
    normalized = "".join(problem.split())

    bracket_count = 0
    deepest = 0
    for current_char in normalized:
        if current_char == '(':
            bracket_count += 1
            deepest = max(deepest, bracket_count)
        elif current_char == ')':
            bracket_count -= 1
            if bracket_count < 0:
                raise E.InvalidExpression("Unbalanced brackets", code="3002")

    if bracket_count != 0:
        raise E.InvalidExpression("Unbalanced brackets", code="3002")

    if deepest > max_depth:
        raise E.InvalidExpression(f"Brackets nested deeper than {max_depth}", code="3009")

    if SINGLE_NUMBER.fullmatch(normalized):
        raise E.InvalidExpression("Nothing to calculate - only one number provided", code="3005")
    elif not re.search(r"[0-9]", normalized):
        raise E.InvalidExpression("No numbers in expression", code="3006")

    return normalized


# -----------------------------
# Evaluator
# -----------------------------

def read_number(problem, b, separator, prefix=""):
    """Collect the number token starting at position b.

    Digits, the separator and 'e'/'E' are consumed; a sign is only part of the
    token when it directly follows the exponent marker.
    Returns:
        (token, position_after_token)
    """
    token = prefix
    while b < len(problem):
        current_char = problem[b]
        if current_char in DIGITS or current_char == separator or current_char in "eE":
            token += current_char
        elif current_char in "+-" and token[-1:] in ("e", "E"):
            token += current_char
        else:
            break
        b += 1
    return token, b


def parse_number(token, separator):
    """Validate a number token and convert it to float."""
    pattern = NUMBER_TEMPLATE.format(sep=re.escape(separator))
    if not re.fullmatch(pattern, token):
        raise E.InvalidExpression(f"Invalid number format: {token}", code="3007")
    return float(token.replace(separator, "."))


def apply_operation(numbers, operator, value):
    """Fold `value` into the accumulator stack according to the pending operator."""
    if operator == '+':
        numbers.append(value)
    elif operator == '-':
        numbers.append(-value)
    elif operator == '*' or operator == '/':
        if not numbers:
            raise E.InvalidExpression(f"Missing Number before '{operator}'", code="3008")
        if operator == '*':
            numbers.append(numbers.pop() * value)
        else:
            if value == 0:
                raise E.DivisionByZero("Division by zero", code="3003")
            numbers.append(numbers.pop() / value)
    else:
        raise E.InvalidExpression(f"Invalid character: {operator}", code="3004")


def evaluate(problem, separator=DEFAULT_SEPARATOR):
    """Evaluate a normalized (whitespace free) expression and return a float.

    Brackets are evaluated recursively, each level with its own stack.
    An operator without a following operand only changes the pending
    operator, so "1+2*" is 3 and "()" counts as 0.
    """
    numbers = []
    operator = '+'
    b = 0

    while b < len(problem):
        current_char = problem[b]

        # --- Bracket: evaluate the content as its own expression ---
        if current_char == '(':
            content, b = isolate_bracket(problem, b)
            apply_operation(numbers, operator, evaluate(content, separator))
            continue

        # --- Numbers ---
        if current_char in DIGITS or current_char == separator:
            token, b = read_number(problem, b, separator)
            apply_operation(numbers, operator, parse_number(token, separator))
            continue

        # --- Unary minus: at the start, after '(' or after another operator ---
        if current_char == '-' and (b == 0 or problem[b - 1] == '(' or isOp(problem[b - 1]) != -1):
            token, b = read_number(problem, b + 1, separator, prefix="-")
            apply_operation(numbers, operator, parse_number(token, separator))
            continue

        # --- Operators ---
        if isOp(current_char) != -1:
            operator = current_char
            b += 1
            continue

        raise E.InvalidExpression(f"Invalid character: {current_char}", code="3004")

    # Plain double additions, newest term first
    result = 0.0
    while numbers:
        result += numbers.pop()
    return result


# -----------------------------
# Result formatting
# -----------------------------

def should_use_exponential(abs_number):
    if abs_number == 0:
        return False
    return abs_number >= 10 ** EXPONENTIAL_THRESHOLD or abs_number <= 10 ** -ZERO_THRESHOLD


def format_number(number, separator=DEFAULT_SEPARATOR):
    """Render a float as text.

    Large and tiny values use exponential notation with at most six
    mantissa decimals ("1.5e+10", "1e-4"); everything else is fixed point
    with up to ten decimals. Trailing zeros are dropped in both cases.
    Overflowed results render as "Infinity", "-Infinity" or "NaN".
    """
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"

    if number == 0:
        return "0"

    if should_use_exponential(abs(number)):
        rendered = "%.6e" % number
        rendered = re.sub(r"\.?0+(?=e)", "", rendered)
        rendered = re.sub(r"e([+-])0", r"e\1", rendered)
    else:
        rendered = "%.*f" % (FIXED_DECIMALS, number)
        rendered = re.sub(r"\.?0+$", "", rendered)
        if rendered.endswith("."):
            rendered = rendered[:-1]

    return rendered.replace(".", separator)


# -----------------------------
# Public entry point
# -----------------------------

def calculate(problem, max_depth=MAX_NESTING_DEPTH):
    """Main API: detect separator → preprocess → evaluate → format.

    `max_depth` bounds the bracket nesting; front-ends pass the user's setting.
    """
    try:
        check_empty(problem)
        separator = detect_separator(problem)
        normalized = preprocess(problem, max_depth)
        logger.debug("Normalized %r to %r (separator %r)", problem, normalized, separator)

        result = evaluate(normalized, separator)
        logger.debug("Evaluated %r to %r", normalized, result)

        return format_number(result, separator)

    # Re-raise our domain errors after attaching the source equation
    except E.MathError as e:
        e.equation = problem
        raise
    # Convert unexpected Python exceptions to our unified error type
    except Exception as e:
        logger.exception("Unexpected error while calculating %r", problem)
        raise E.MathError(message=str(e).strip(), code="9999", equation=problem) from e


def repl_main():
    """Simple REPL-like runner for manual testing of the engine."""
    print("Enter the problem: ")
    problem = input()
    try:
        print(calculate(problem))
    except E.MathError as e:
        print(f"Error {e.code}: {e.message}")


if __name__ == "__main__":
    # Allow running this module directly for quick CLI tests:
    #   python -m calculator.MathEngine
    repl_main()

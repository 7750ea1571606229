"""Error message templates.

Every runtime diagnostic is built here so messages stay consistent and
testable. The ``message`` field is what callers see in their error list.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    """

    # Base documentation URL
    _DOCS_BASE = "https://projectfluent.org/fluent/guide"

    @staticmethod
    def unknown_identifier(identifier: str) -> Diagnostic:
        """Top-level format() of an id that no bundle defines.

        Args:
            identifier: Message id, or term id with its leading ``-``
        """
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_IDENTIFIER,
            message=f"Unknown identifier: {identifier}",
            hint="Check that the resource defining it was added to the bundle",
        )

    @staticmethod
    def message_not_found(message_id: str) -> Diagnostic:
        """Message reference not found in bundle.

        Args:
            message_id: The message identifier that was not found

        Returns:
            Diagnostic for MESSAGE_NOT_FOUND
        """
        return Diagnostic(
            code=DiagnosticCode.MESSAGE_NOT_FOUND,
            message=f"Unknown message: {message_id}",
            hint="Check that the message is defined in the loaded resources",
            help_url=f"{ErrorTemplate._DOCS_BASE}/messages.html",
        )

    @staticmethod
    def attribute_not_found(attribute: str, message_id: str) -> Diagnostic:
        """Message attribute not found.

        Args:
            attribute: The attribute name that was not found
            message_id: The message containing (or not) the attribute
        """
        return Diagnostic(
            code=DiagnosticCode.ATTRIBUTE_NOT_FOUND,
            message=f"Unknown attribute: {message_id}.{attribute}",
            hint=f"Check that message '{message_id}' has an attribute '.{attribute}'",
            help_url=f"{ErrorTemplate._DOCS_BASE}/attributes.html",
        )

    @staticmethod
    def term_not_found(term_id: str) -> Diagnostic:
        """Term reference not found.

        Args:
            term_id: The term identifier (without leading -)
        """
        return Diagnostic(
            code=DiagnosticCode.TERM_NOT_FOUND,
            message=f"Unknown term: -{term_id}",
            hint="Terms must be defined before they are referenced",
            help_url=f"{ErrorTemplate._DOCS_BASE}/terms.html",
        )

    @staticmethod
    def term_attribute_not_found(attribute: str, term_id: str) -> Diagnostic:
        """Term attribute not found."""
        return Diagnostic(
            code=DiagnosticCode.TERM_ATTRIBUTE_NOT_FOUND,
            message=f"Unknown attribute: -{term_id}.{attribute}",
            hint=f"Check that term '-{term_id}' has an attribute '.{attribute}'",
            help_url=f"{ErrorTemplate._DOCS_BASE}/terms.html",
        )

    @staticmethod
    def unknown_variable(variable_name: str) -> Diagnostic:
        """Variable not provided in arguments.

        Args:
            variable_name: The variable name (without leading $)
        """
        return Diagnostic(
            code=DiagnosticCode.VARIABLE_NOT_PROVIDED,
            message=f"Unknown variable: ${variable_name}",
            hint=f"Pass '{variable_name}' in the arguments mapping",
            help_url=f"{ErrorTemplate._DOCS_BASE}/variables.html",
        )

    @staticmethod
    def message_no_value(message_id: str) -> Diagnostic:
        """Message has no value (only attributes)."""
        return Diagnostic(
            code=DiagnosticCode.MESSAGE_NO_VALUE,
            message=f"No value: {message_id}",
            hint="Message has only attributes; specify which attribute to format",
            help_url=f"{ErrorTemplate._DOCS_BASE}/messages.html",
        )

    @staticmethod
    def duplicate_entry(entry_id: str) -> Diagnostic:
        """Entry id already registered and overrides are disabled."""
        return Diagnostic(
            code=DiagnosticCode.DUPLICATE_ENTRY,
            message=f"Attempt to override an existing entry: {entry_id}",
            hint="Pass allow_overrides=True to replace existing entries",
            severity="warning",
        )

    @staticmethod
    def cyclic_reference(identifier: str) -> Diagnostic:
        """Reference to an id already being resolved higher up the stack.

        Args:
            identifier: The id as written (``-`` prefix for terms)
        """
        return Diagnostic(
            code=DiagnosticCode.CYCLIC_REFERENCE,
            message=f"Circular reference detected: {identifier}",
            hint="Break the cycle by removing one of the references",
            help_url=f"{ErrorTemplate._DOCS_BASE}/references.html",
        )

    @staticmethod
    def max_depth_exceeded(identifier: str, max_depth: int) -> Diagnostic:
        """Acyclic reference chain deeper than the configured limit."""
        return Diagnostic(
            code=DiagnosticCode.MAX_DEPTH_EXCEEDED,
            message=f"Maximum resolution depth ({max_depth}) exceeded while resolving {identifier}",
            hint="Flatten the chain of message and term references",
        )

    @staticmethod
    def depth_exceeded(max_depth: int) -> Diagnostic:
        """Tree traversal nested deeper than the configured limit."""
        return Diagnostic(
            code=DiagnosticCode.MAX_DEPTH_EXCEEDED,
            message=f"Maximum nesting depth ({max_depth}) exceeded",
            hint="The AST is nested too deeply; it was likely built programmatically",
        )

    @staticmethod
    def function_not_found(function_name: str) -> Diagnostic:
        """Function not registered in the bundle."""
        return Diagnostic(
            code=DiagnosticCode.FUNCTION_NOT_FOUND,
            message=f"Unknown function: {function_name}()",
            hint="Register the function with FluentBundle.add_function()",
            help_url=f"{ErrorTemplate._DOCS_BASE}/functions.html",
            function_name=function_name,
        )

    @staticmethod
    def function_failed(function_name: str, error_msg: str) -> Diagnostic:
        """Function raised while being called.

        Args:
            function_name: FTL name of the function
            error_msg: Text of the underlying exception
        """
        return Diagnostic(
            code=DiagnosticCode.FUNCTION_FAILED,
            message=f"Function {function_name}() failed: {error_msg}",
            help_url=f"{ErrorTemplate._DOCS_BASE}/functions.html",
            function_name=function_name,
        )

    @staticmethod
    def invalid_argument(
        function_name: str,
        argument_name: str,
        expected_type: str,
        received: object,
    ) -> Diagnostic:
        """Option or argument value that cannot be coerced to its declared type.

        Args:
            function_name: FTL name of the function (e.g. "NUMBER")
            argument_name: FTL option name as written (e.g. "minimumFractionDigits")
            expected_type: Human description of the accepted type
            received: The offending value
        """
        received_type = type(received).__name__
        return Diagnostic(
            code=DiagnosticCode.INVALID_ARGUMENT,
            message=(
                f"Invalid argument '{argument_name}' in {function_name}(): "
                f"expected {expected_type}, got {received!r}"
            ),
            hint=f"Pass a {expected_type} for '{argument_name}'",
            function_name=function_name,
            argument_name=argument_name,
            expected_type=expected_type,
            received_type=received_type,
        )

    @staticmethod
    def formatting_failed(function_name: str, value: object, reason: str) -> Diagnostic:
        """Babel could not format a value."""
        return Diagnostic(
            code=DiagnosticCode.FORMATTING_FAILED,
            message=f"{function_name}() could not format {value!r}: {reason}",
            function_name=function_name,
        )

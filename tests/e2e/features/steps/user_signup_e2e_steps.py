"""
Step definitions for E2E signup tests.

These steps test the complete workflow with:
- Real HTTP requests to the API container
- Real email delivery via Mailhog
- Mailhog API for email verification
"""

from behave import given, then, when


def post_user(context, username, email, password, language=None):
    headers = {"Accept-Language": language} if language else {}
    context.user_email = email
    context.response = context.client.post(
        "/api/1.0/users",
        json={"username": username, "email": email, "password": password},
        headers=headers,
    )


@when('I sign up as "{username}" with email "{email}" and password "{password}"')
def step_sign_up(context, username, email, password):
    """Register a new user via API."""
    post_user(context, username, email, password)


@when('I sign up in "{language}" as "{username}" with email "{email}" and password "{password}"')
def step_sign_up_localized(context, username, email, password, language):
    """Register a new user with an Accept-Language header."""
    post_user(context, username, email, password, language)


@given('a user "{username}" signed up with email "{email}"')
def step_signed_up_user(context, username, email):
    """Register a new user (given step)."""
    post_user(context, username, email, "Pass1234")
    assert (
        context.response.status_code == 200
    ), f"Signup failed: {context.response.status_code} - {context.response.text}"


@when("I sign up without a username")
def step_sign_up_without_username(context):
    context.response = context.client.post(
        "/api/1.0/users", json={"email": "user1@example.com", "password": "Pass1234"}
    )


@then("the response status code should be {status_code:d}")
def step_check_status_code(context, status_code):
    """Check the response status code."""
    assert context.response.status_code == status_code, (
        f"Expected {status_code}, got {context.response.status_code}. "
        f"Response: {context.response.text}"
    )


@then('the response message should be "{message}"')
def step_check_message(context, message):
    data = context.response.json()
    assert data.get("message") == message, f"Expected message '{message}', got {data}"


@then('the validation error for "{field}" should be "{message}"')
def step_check_validation_error(context, field, message):
    errors = context.response.json().get("validationErrors", {})
    assert errors.get(field) == message, f"Expected {field}: '{message}', got {errors}"


@then("an email should be received within {timeout:d} seconds")
@when("I wait for the activation email")
def step_wait_for_email(context, timeout=15):
    """
    Wait for email to arrive in Mailhog.

    The API only answers after SMTP accepted the message, so the email
    should already be there.
    """
    try:
        context.email_message = context.mailhog.wait_for_email(
            to_email=context.user_email, timeout=timeout
        )
        print(f"✓ Email received for {context.user_email}")
    except TimeoutError as e:
        raise AssertionError(
            f"No email received for {context.user_email} within {timeout} seconds. "
            f"Check the API's SMTP settings. Error: {e}"
        ) from e


@then("the email should contain an activation token")
@when("I extract the activation token from the email")
def step_extract_activation_token(context):
    """Extract the 16 hex character token from the activation link."""
    try:
        context.activation_token = context.mailhog.extract_activation_token(
            context.email_message
        )
        print("✓ Extracted activation token")
    except ValueError as e:
        raise AssertionError(f"Could not extract activation token from email. Error: {e}") from e


@when("I activate the account with the token from the email")
@when("I try to activate again with the same token")
def step_activate_with_email_token(context):
    context.response = context.client.post(f"/api/1.0/users/token/{context.activation_token}")


@when('I activate with token "{token}"')
def step_activate_with_specific_token(context, token):
    """Activate with a specific token (for testing wrong tokens)."""
    context.response = context.client.post(f"/api/1.0/users/token/{token}")


@then("the activation should succeed")
def step_activation_successful(context):
    """Verify activation was successful."""
    assert (
        context.response.status_code == 200
    ), f"Activation failed: {context.response.status_code} - {context.response.text}"
    assert context.response.json() == {"message": "Account is activated"}
    print("✓ Activation successful")


@then("the error body should name the request path")
def step_check_error_body(context):
    data = context.response.json()
    assert set(data) >= {"path", "timestamp", "message"}, f"Unexpected error body: {data}"
    assert data["path"] == context.response.request.url.path

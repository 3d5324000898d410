"""Issue a short-lived token, then parse and verify it as a consumer would."""

from __future__ import annotations

from datetime import timedelta

from toki import JsonWebToken, TokenError, load_config, setup_logging


def main() -> None:
    config = load_config()
    setup_logging(config.log_level)

    token = JsonWebToken.new(config=config)
    token.claims.issuer = "example-issuer"
    token.claims.subject = "user-42"
    token.claims.expires_in(timedelta(minutes=15))
    token.claims["scope"] = "read:reports"
    token.sign("change-me")
    encoded = token.render()
    print(encoded)

    try:
        incoming = JsonWebToken.from_string(encoded, config=config)
        incoming.verify("change-me")
    except TokenError as exc:
        print(f"rejected: {exc}")
        return
    print(f"accepted: sub={incoming.claims.subject} scope={incoming.claims['scope']}")


if __name__ == "__main__":
    main()

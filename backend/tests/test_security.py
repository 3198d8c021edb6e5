import threading

import pytest

from vetclinic.core.security import (
    TOKENS,
    hash_password,
    issue_token,
    resolve_token,
    revoke_token,
    revoke_tokens_for,
    verify_password,
)


@pytest.fixture(autouse=True)
def empty_token_table():
    TOKENS.clear()
    yield
    TOKENS.clear()


def test_password_hash_round_trip():
    stored = hash_password("correct-horse")
    assert stored.startswith("pbkdf2_sha256$")
    assert verify_password("correct-horse", stored)
    assert not verify_password("wrong-horse", stored)
    assert not verify_password("correct-horse", "plaintext")


def test_revoke_single_token_leaves_other_sessions():
    first = issue_token(1)
    second = issue_token(1)

    revoke_token(first)
    revoke_token("never-issued")

    assert resolve_token(first) is None
    assert resolve_token(second) == 1


def test_revoke_for_user_leaves_other_users():
    mine = [issue_token(1) for _ in range(3)]
    theirs = issue_token(2)

    revoke_tokens_for(1)

    assert all(resolve_token(token) is None for token in mine)
    assert resolve_token(theirs) == 2


def test_concurrent_issue_and_revoke():
    errors = []
    kept = []
    start = threading.Barrier(8)

    def churn(user_id):
        try:
            start.wait()
            for _ in range(300):
                issue_token(user_id)
                revoke_tokens_for(user_id)
        except Exception as e:
            errors.append(e)

    def login_and_keep():
        try:
            start.wait()
            for _ in range(300):
                kept.append(issue_token(99))
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=churn, args=(n,)) for n in range(1, 7)]
    threads += [threading.Thread(target=login_and_keep) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert set(TOKENS.values()) == {99}
    assert len(TOKENS) == len(kept) == 600

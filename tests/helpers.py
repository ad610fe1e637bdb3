from shortlink.state import Session, UserIdentity

ALICE = Session(UserIdentity(id="u-alice", email="alice@example.com"), access_token="token-alice")
BOB = Session(UserIdentity(id="u-bob", email="bob@example.com"), access_token="token-bob")

import pytest

from conftest import FIXED_NOW, make_action, make_activity

from catering.application.exceptions import MenuAuthoringError
import catering.application.use_cases.validate_action as validate_action_module
from catering.application.utils.replies import WELCOME_HINT, WELCOME_TEXT
from catering.application.utils.turn_state import TurnState
from catering.domain.entities.oauth_state import OAuthState
from catering.domain.entities.user import Lunch

STATE_KEY = "webchat/conversations/conv-1/users/user-1"


def _order(current, next_card, **extra):
    return make_action("order", {"currentCard": current, "nextCardToSend": next_card, **extra})


def _stored_state(state_store):
    return TurnState(state_store, STATE_KEY, "user-1")


def test_welcome_greets_new_members_but_not_the_bot(dispatcher, connector):
    activity = make_activity(
        type="conversationUpdate",
        membersAdded=[{"id": "bot-1"}, {"id": "user-1"}, {"id": "user-2"}],
    )

    result = dispatcher.handle(activity)

    assert result.status == 200 and result.body is None
    assert [reply["text"] for reply in connector.sent] == [WELCOME_TEXT, WELCOME_HINT, WELCOME_TEXT, WELCOME_HINT]


def test_welcome_is_skipped_on_other_channels(dispatcher, connector):
    activity = make_activity(type="conversationUpdate", channelId="msteams", membersAdded=[{"id": "user-1"}])

    dispatcher.handle(activity)

    assert connector.sent == []


def test_message_without_flow_sends_fallback_card(dispatcher, connector, state_store):
    result = dispatcher.handle(make_activity(text="hello"))

    assert result.status == 200
    assert len(connector.sent) == 1
    card = connector.sent[0]["attachments"][0]["content"]
    assert card["body"][0]["text"] == "Pick a response for the bot to send"
    assert state_store.writes == []


def test_message_with_flow_starts_an_order(dispatcher_with_flow, connector):
    dispatcher_with_flow.handle(make_activity(text="I'm hungry"))

    card = connector.sent[0]["attachments"][0]["content"]
    assert card["body"][0]["text"] == "What would you like for lunch?"


def test_message_with_flow_answers_recents(dispatcher_with_flow, connector):
    dispatcher_with_flow.handle(make_activity(text="Recents"))

    card = connector.sent[0]["attachments"][0]["content"]
    assert card["body"][0]["text"] == "Recent orders (0)"


def test_order_step_saves_user_once(dispatcher, state_store, orders):
    result = dispatcher.handle(_order(0, 1, option="Sandwich"))

    assert result.status == 200
    assert result.body["type"] == "application/vnd.microsoft.card.adaptive"
    assert state_store.writes == [STATE_KEY]
    assert _stored_state(state_store).get_user().lunch.entree == "Sandwich"
    assert orders.upserts == []


def test_order_across_turns_then_confirm(dispatcher, state_store, orders):
    dispatcher.handle(_order(0, 1, option="Salad"))
    dispatcher.handle(_order(1, 2, option="Water"))
    dispatcher.handle(_order(2, 4))

    assert len(orders.upserts) == 1
    saved = orders.upserts[0]
    assert (saved.id, saved.lunch.entree, saved.lunch.drink) == ("user-1", "Salad", "Water")
    assert _stored_state(state_store).get_user().lunch.order_timestamp is not None
    assert len(state_store.writes) == 3


def test_review_turn_does_not_write_state(dispatcher, state_store):
    dispatcher.handle(_order(11, 2))

    assert state_store.writes == []


@pytest.mark.parametrize(
    "value, code",
    [
        ({"action": {"verb": "order"}}, "InvalidPayload"),
        ({"action": {"verb": "order", "data": {"currentCard": "soup"}}}, "InvalidPayload"),
        ({"action": {"verb": "dance", "data": {}}}, "VerbNotSupported"),
    ],
)
def test_invalid_actions_answer_200_with_error_envelope(dispatcher, value, code):
    result = dispatcher.handle(make_activity(type="invoke", name="adaptiveCard/action", value=value))

    assert result.status == 200
    assert result.body["statusCode"] == 400
    assert result.body["type"] == "application/vnd.microsoft.error"
    assert result.body["value"]["code"] == code


def test_next_and_back_verbs(dispatcher):
    forward = dispatcher.handle(make_action("next", {"currentCard": 11}))
    back = dispatcher.handle(make_action("back", {}))

    assert forward.body["value"]["body"][0]["text"] == "This card was sent back by the bot."
    assert back.body["value"]["body"][0]["text"] == "Pick a response for the bot to send"


def test_err_throttle_warning(dispatcher):
    result = dispatcher.handle(make_action("err", {"currentCard": 11, "nextCardToSend": 8}))

    assert result.status == 200
    assert result.body == {
        "statusCode": 429,
        "type": "application/vnd.microsoft.activity.retryAfter",
        "value": 15,
    }


def test_authoring_error_propagates_without_saving(dispatcher, state_store):
    with pytest.raises(MenuAuthoringError):
        dispatcher.handle(_order(0, 9, option="Sandwich"))

    assert state_store.writes == []


def test_nominal_sign_in_round_trip(dispatcher, nominal_provider, state_store):
    started = dispatcher.handle(make_action("nominal-oauth", {"currentCard": 11, "nextCardToSend": 7}))

    assert started.body["statusCode"] == 401
    assert started.body["type"] == "application/vnd.microsoft.activity.loginRequest"
    assert started.body["value"] == {"loginUrl": "https://login.example/NonSSOBotApp"}
    assert _stored_state(state_store).get_oauth_state() is OAuthState.PENDING_NOMINAL

    nominal_provider.token = "tok-1"
    finished = dispatcher.handle(make_activity(type="invoke", name="signin/verifyState", value={"state": "424242"}))

    assert finished.status == 200
    assert finished.body["value"] == "Received a token for nominal oauth: tok-1"
    assert _stored_state(state_store).get_oauth_state() is OAuthState.IDLE
    assert state_store.writes == [STATE_KEY, STATE_KEY]


def test_sso_token_exchange_continuation(dispatcher, sso_provider):
    dispatcher.handle(make_action("sso-oauth", {}))
    sso_provider.token = "tok-sso"

    result = dispatcher.handle(
        make_activity(type="invoke", name="signin/tokenExchange", value={"id": "x", "connectionName": "BotApp", "token": "t"})
    )

    assert result.body["value"] == "Received a token for sso oauth: tok-sso"
    assert sso_provider.calls == ["begin", "complete"]


def test_unexpected_sign_in_continuation_is_rejected(dispatcher, state_store):
    result = dispatcher.handle(make_activity(type="invoke", name="signin/verifyState", value={"state": "1"}))

    assert result.status == 400
    assert result.body["value"] == {
        "code": "BadRequest",
        "message": "Received an invoke with name signin/verifyState but not as a result of a loginRequest",
    }
    assert state_store.writes == []


def test_signout_hits_both_providers_nominal_first(dispatcher, nominal_provider, sso_provider):
    call_log: list[str] = []
    nominal_provider.call_log = call_log
    sso_provider.call_log = call_log

    result = dispatcher.handle(make_action("signout", {}))

    assert result.body["value"] == "Signed out of BotApp."
    assert call_log == ["NonSSOBotApp.sign_out", "BotApp.sign_out"]


def test_unknown_invoke_is_not_implemented(dispatcher):
    result = dispatcher.handle(make_activity(type="invoke", name="composeExtension/query", value={}))

    assert result.status == 501
    assert result.body is None


def test_users_in_other_conversations_do_not_share_state(dispatcher, state_store):
    dispatcher.handle(_order(0, 1, option="Salad"))
    dispatcher.handle(
        make_activity(
            type="invoke",
            name="adaptiveCard/action",
            conversation={"id": "conv-2"},
            value={"action": {"verb": "order", "data": {"currentCard": 0, "nextCardToSend": 1, "option": "Sandwich"}}},
        )
    )

    assert _stored_state(state_store).get_user().lunch.entree == "Salad"
    other = TurnState(state_store, "webchat/conversations/conv-2/users/user-1", "user-1")
    assert other.get_user().lunch.entree == "Sandwich"


def test_new_order_after_confirmation_starts_from_empty_lunch(dispatcher_with_flow, state_store, orders):
    dispatcher_with_flow.handle(_order(0, 1, option="Salad"))
    dispatcher_with_flow.handle(_order(1, 2, option="Water"))
    dispatcher_with_flow.handle(_order(2, 4))

    dispatcher_with_flow.handle(make_activity(text="hi"))
    assert _stored_state(state_store).get_user().lunch == Lunch()

    dispatcher_with_flow.handle(_order(0, 1, option="Pizza"))
    dispatcher_with_flow.handle(_order(2, 4))

    lunch = orders.upserts[-1].lunch
    assert (lunch.entree, lunch.drink) == ("Pizza", None)
    assert lunch.order_timestamp == FIXED_NOW
    assert len(orders.upserts) == 2


def test_entree_after_confirmation_clears_old_timestamp(dispatcher, state_store):
    dispatcher.handle(_order(0, 1, option="Salad"))
    dispatcher.handle(_order(1, 2, option="Water"))
    dispatcher.handle(_order(2, 4))

    dispatcher.handle(_order(0, 1, option="Pizza"))

    assert _stored_state(state_store).get_user().lunch == Lunch(entree="Pizza")


def test_preset_choice_after_rejected_text_goes_through(dispatcher, state_store):
    rejected = dispatcher.handle(_order(0, 1, custom="a bag of rocks"))
    text_input = rejected.body["value"]["body"][2]
    assert "value" not in text_input

    dispatcher.handle(_order(0, 1, option="Sandwich"))

    assert _stored_state(state_store).get_user().lunch.entree == "Sandwich"


def test_verb_without_handler_answers_verb_not_supported(dispatcher, monkeypatch):
    monkeypatch.setattr(validate_action_module, "SUPPORTED_VERBS", validate_action_module.SUPPORTED_VERBS | {"dance"})

    result = dispatcher.handle(make_action("dance", {}))

    assert result.status == 200
    assert result.body["statusCode"] == 400
    assert result.body["value"] == {"code": "VerbNotSupported", "message": "The verb 'dance' is not supported."}

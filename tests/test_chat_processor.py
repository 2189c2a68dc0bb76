import asyncio
import json

from kaomoji_replacer.chat import ChatStore, MessageProcessor
from kaomoji_replacer.models import ChatMessage
from kaomoji_replacer.utils.config import Config


def _config(**overrides) -> Config:
    values = {"MODIFY_MODE": "display", "PROCESS_AI_MESSAGES": True, "PROCESS_USER_MESSAGES": False}
    values.update(overrides)
    return Config(**values)


def _chat(tmp_path) -> ChatStore:
    messages = [
        ChatMessage(mes="hello [kaomoji:happy]", name="Bot"),
        ChatMessage(mes="me too [kaomoji:happy]", name="User", is_user=True),
        ChatMessage(mes="[kaomoji:happy]", is_system=True),
        ChatMessage(mes="nothing [kaomoji:zzz]", name="Bot"),
        ChatMessage(mes="[kaomoji:cry] again", name="Bot"),
    ]
    return ChatStore(messages=messages, path=str(tmp_path / "chat.jsonl"))


def test_display_mode_keeps_message_text(tmp_path, engine) -> None:
    chat = _chat(tmp_path)
    processor = MessageProcessor(engine, chat, _config())

    assert asyncio.run(processor.process_message(0)) is True

    message = chat.get(0)
    assert message.mes == "hello [kaomoji:happy]"
    assert message.display_text == "hello (^_^)"
    assert message.original_text == "hello [kaomoji:happy]"
    assert (tmp_path / "chat.jsonl").exists()


def test_skips_user_system_and_unmatched_messages(tmp_path, engine) -> None:
    chat = _chat(tmp_path)
    processor = MessageProcessor(engine, chat, _config())

    assert asyncio.run(processor.process_message(1)) is False
    assert asyncio.run(processor.process_message(2)) is False
    assert asyncio.run(processor.process_message(3)) is False
    assert asyncio.run(processor.process_message(99)) is False
    assert chat.get(3).original_text is None


def test_content_mode_rewrites_and_restores(tmp_path, engine) -> None:
    chat = _chat(tmp_path)
    edited = []
    chat.on_edited(edited.append)
    processor = MessageProcessor(engine, chat, _config(MODIFY_MODE="content"))

    assert asyncio.run(processor.process_message(4)) is True
    assert chat.get(4).mes == "(T_T) again"
    assert edited == [4]

    assert asyncio.run(processor.restore_message(4)) is True
    assert chat.get(4).mes == "[kaomoji:cry] again"
    assert chat.get(4).original_text is None
    assert asyncio.run(processor.restore_message(4)) is False


def test_process_all_and_restore_all(tmp_path, engine) -> None:
    chat = _chat(tmp_path)
    processor = MessageProcessor(engine, chat, _config(PROCESS_USER_MESSAGES=True))

    assert asyncio.run(processor.process_all()) == 3
    assert asyncio.run(processor.restore_all()) == 3
    assert all("display_text" not in message.extra for message in chat.messages)


def test_auto_processing_follows_settings(tmp_path, engine) -> None:
    chat = _chat(tmp_path)

    disabled = MessageProcessor(engine, chat, _config(AUTO_PROCESS=False))
    assert asyncio.run(disabled.on_message_received(0)) is False

    enabled = MessageProcessor(engine, chat, _config())
    assert asyncio.run(enabled.on_message_sent(1)) is False
    assert asyncio.run(enabled.on_message_received(0)) is True


def test_chat_store_round_trip_keeps_header(tmp_path) -> None:
    path = tmp_path / "chat.jsonl"
    lines = [
        {"user_name": "User", "character_name": "Bot"},
        {"name": "Bot", "is_user": False, "mes": "hi [kaomoji:happy]", "send_date": "today"},
    ]
    path.write_text("\n".join(json.dumps(line) for line in lines), encoding="utf-8")

    chat = asyncio.run(ChatStore.load(str(path)))
    assert chat.header == lines[0]
    assert len(chat) == 1

    chat.get(0).extra["display_text"] = "hi (^_^)"
    asyncio.run(chat.save())

    reloaded = asyncio.run(ChatStore.load(str(path)))
    assert reloaded.get(0).display_text == "hi (^_^)"
    assert reloaded.get(0).raw["send_date"] == "today"

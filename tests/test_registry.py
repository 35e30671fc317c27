"""Tests for the channel registry and dispatcher"""

import pytest

from pushgate.channels import DeliveryOptions
from pushgate.channels.detect import detect_channel_type
from pushgate.channels.dispatcher import DispatchTarget, dispatch_many, dispatch_message
from pushgate.channels.feishu import FeishuChannel
from pushgate.channels.registry import ChannelRegistry, create_default_registry
from pushgate.errors import ConfigurationError, UnknownChannelError
from pushgate.schemas.template import ChannelType
from tests.conftest import RecordingHandler, make_transport

FEISHU_URL = "https://open.feishu.cn/open-apis/bot/v2/hook/abc"
TEXT = {"msg_type": "text", "content": {"text": "hi"}}


class TestChannelRegistry:
    def test_resolve_unregistered(self):
        with pytest.raises(UnknownChannelError) as exc_info:
            ChannelRegistry().resolve("feishu")
        assert exc_info.value.channel_type == "feishu"

    def test_resolve_instance(self):
        registry = ChannelRegistry()
        channel = FeishuChannel()
        registry.register("feishu", channel)

        assert registry.resolve("feishu") is channel
        assert registry.resolve(ChannelType.FEISHU).get_label() == "Feishu Group Bot"

    def test_resolve_factory(self):
        registry = ChannelRegistry()
        registry.register(ChannelType.FEISHU, FeishuChannel)

        channel = registry.resolve("FEISHU")
        assert isinstance(channel, FeishuChannel)
        assert channel.get_label() == FeishuChannel.config.label

    def test_typo_suggestion(self):
        registry = create_default_registry()
        with pytest.raises(UnknownChannelError, match="Did you mean 'dingtalk'"):
            registry.resolve("dingding")

    def test_no_suggestion_for_unregistered_target(self):
        registry = ChannelRegistry()
        registry.register("feishu", FeishuChannel)
        with pytest.raises(UnknownChannelError) as exc_info:
            registry.resolve("dingding")
        assert exc_info.value.suggestion is None

    def test_default_registry(self):
        registry = create_default_registry()

        assert set(registry.types()) == {t.value for t in ChannelType}
        assert "slack" in registry
        assert "teams" not in registry
        labels = {c.channel_type: c.get_label() for c in registry.channels()}
        assert labels["feishu"] == "Feishu Group Bot"

    def test_default_registry_shares_transport(self):
        transport = make_transport(RecordingHandler())
        registry = create_default_registry(transport=transport)
        assert all(c.transport is transport for c in registry.channels())


class TestDetectChannelType:
    @pytest.mark.parametrize("url,expected", [
        (FEISHU_URL, ChannelType.FEISHU),
        ("https://open.larksuite.com/open-apis/bot/v2/hook/x", ChannelType.FEISHU),
        ("https://oapi.dingtalk.com/robot/send?access_token=x", ChannelType.DINGTALK),
        ("https://qyapi.weixin.qq.com/cgi-bin/webhook/send?key=x", ChannelType.WECOM),
        ("https://hooks.slack.com/services/a/b/c", ChannelType.SLACK),
        ("https://discord.com/api/webhooks/1/t", ChannelType.DISCORD),
        ("https://example.com/hook", None),
    ])
    def test_detect(self, url, expected):
        assert detect_channel_type(url) == expected


class TestDispatcher:
    @pytest.mark.asyncio
    async def test_dispatch_message(self):
        handler = RecordingHandler()
        registry = create_default_registry(transport=make_transport(handler))

        response = await dispatch_message(registry, "feishu", TEXT, DeliveryOptions(endpoint=FEISHU_URL))

        assert response.status_code == 200
        assert handler.last_body == TEXT

    @pytest.mark.asyncio
    async def test_dispatch_auto_detect(self):
        handler = RecordingHandler()
        registry = create_default_registry(transport=make_transport(handler))

        await dispatch_message(registry, None, TEXT, DeliveryOptions(endpoint=FEISHU_URL))

        assert len(handler.requests) == 1

    @pytest.mark.asyncio
    async def test_dispatch_auto_detect_unknown_host(self):
        registry = create_default_registry(transport=make_transport(RecordingHandler()))
        with pytest.raises(UnknownChannelError) as exc_info:
            await dispatch_message(registry, None, TEXT, DeliveryOptions(endpoint="https://example.com/hook"))
        assert "example.com" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_dispatch_auto_detect_missing_endpoint(self):
        registry = create_default_registry(transport=make_transport(RecordingHandler()))
        with pytest.raises(ConfigurationError):
            await dispatch_message(registry, None, TEXT, DeliveryOptions(endpoint=""))

    @pytest.mark.asyncio
    async def test_dispatch_many_reports_each_outcome(self):
        handler = RecordingHandler()
        registry = create_default_registry(transport=make_transport(handler))
        targets = [
            DispatchTarget("feishu", TEXT, DeliveryOptions(endpoint=FEISHU_URL)),
            DispatchTarget("feishu", TEXT, DeliveryOptions(endpoint="")),
            DispatchTarget("teams", TEXT, DeliveryOptions(endpoint=FEISHU_URL)),
            DispatchTarget(ChannelType.SLACK, {"msg_type": "text", "text": "hi"},
                           DeliveryOptions(endpoint="https://hooks.slack.com/services/a/b/c")),
        ]

        outcomes = await dispatch_many(registry, targets)

        assert [o.success for o in outcomes] == [True, False, False, True]
        assert outcomes[0].status_code == 200
        assert "missing endpoint" in outcomes[1].error
        assert "Unknown channel type" in outcomes[2].error
        assert outcomes[3].channel_type == "slack"
        assert len(handler.requests) == 2

    @pytest.mark.asyncio
    async def test_dispatch_many_delivery_error(self):
        handler = RecordingHandler(status_code=400, json_body={"msg": "invalid token"})
        registry = create_default_registry(transport=make_transport(handler))

        outcomes = await dispatch_many(
            registry, [DispatchTarget("feishu", TEXT, DeliveryOptions(endpoint=FEISHU_URL))]
        )

        assert outcomes[0].success is False
        assert outcomes[0].status_code == 400
        assert "invalid token" in outcomes[0].error

    @pytest.mark.asyncio
    async def test_dispatch_many_records_detected_type(self):
        handler = RecordingHandler()
        registry = create_default_registry(transport=make_transport(handler))
        targets = [
            DispatchTarget(None, TEXT, DeliveryOptions(endpoint=FEISHU_URL)),
            DispatchTarget(None, TEXT, DeliveryOptions(endpoint="https://example.com/hook")),
        ]

        outcomes = await dispatch_many(registry, targets)

        assert outcomes[0].success is True
        assert outcomes[0].channel_type == "feishu"
        assert outcomes[1].success is False
        assert outcomes[1].channel_type is None
        assert "example.com" in outcomes[1].error

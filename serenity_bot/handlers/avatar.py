"""形象与模型查询处理器。"""

import logging

from ..router import BotContext

logger = logging.getLogger(__name__)


class AvatarHandler:
    """处理 type=avatar / type=models 请求。"""

    async def avatar(self, ctx: BotContext) -> bool:
        """persona + 情绪 -> 呈现描述（未知值会回落，不会报错）。"""
        companion = ctx.services.companion
        persona = ctx.persona
        voice = ctx.event.get("voice")
        if not persona and voice:
            persona = companion.presenter.persona_for_voice(voice)

        descriptor = companion.present_avatar(persona, ctx.event.get("emotion"))
        await ctx.send_json({"type": "avatar", "avatar": descriptor.to_dict()})
        return True

    async def models(self, ctx: BotContext) -> bool:
        models = await ctx.services.chat.list_models()
        logger.debug("models=%s", models)
        await ctx.send_json(
            {
                "type": "models",
                "models": models,
                "personas": ctx.services.companion.presenter.available_personas(),
            }
        )
        return True

"""对话处理器。

一轮对话的完整流程：
1. 识别用户情绪，记录用户发言
2. 拼装上下文 + 人设，调用推理服务
3. 识别回复情绪，记录回复
4. 计算形象呈现描述和表情时间线，回包
"""

import logging

from ..router import BotContext

logger = logging.getLogger(__name__)


class ChatHandler:
    """处理 type=chat 请求。"""

    async def handle(self, ctx: BotContext) -> bool:
        """处理一轮对话。

        返回:
            是否已处理
        """
        if not ctx.text:
            await ctx.send_error("empty message")
            return True

        companion = ctx.services.companion
        persona = companion.resolve_persona(ctx.persona)

        # 1) 用户发言：识别情绪后先写入记忆
        user_emotion = companion.classify_emotion(ctx.text)
        record = await companion.async_record_turn("user", ctx.text, user_emotion)

        # 2) 推理（失败时 chat 客户端返回固定回复，不抛异常）
        prompt = companion.build_prompt(persona, ctx.text)
        reply_text = await ctx.services.chat.generate(prompt)

        # 3) 回复情绪 + 记忆
        reply_emotion = companion.reply_emotion(reply_text)
        await companion.async_record_turn("assistant", reply_text, reply_emotion, persona)

        # 4) 形象
        avatar = companion.present_avatar(persona, reply_emotion)
        segments = companion.split_segments(reply_text)

        logger.info(
            "chat persona=%s user_emo=%s reply_emo=%s reply_len=%s",
            persona,
            user_emotion,
            reply_emotion,
            len(reply_text),
        )
        await ctx.send_json(
            {
                "type": "reply",
                "persona": persona,
                "user_emotion": user_emotion,
                "reply": reply_text,
                "reply_emotion": reply_emotion,
                "avatar": avatar.to_dict(),
                "segments": [segment.to_dict() for segment in segments],
                "memory_id": record.id if record is not None else None,
            }
        )
        return True

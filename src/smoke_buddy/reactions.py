"""
悠悠's reactions.

Count replies are fixed narrative strings for 1-20 cigarettes and a generic
comparison past that. Free-text interactions are matched against an ordered
keyword table (first hit wins), then a random base phrase is decorated with a
random face and sound:

    base + emoticon + "～" + sound

8 faces x 4 sounds x the phrase variants gives well over a thousand distinct
replies.
"""

import random
import re
from collections.abc import Sequence
from typing import Protocol, TypeVar

from smoke_buddy.store import CounterRecord

T = TypeVar("T")


class Chooser(Protocol):
    def choice(self, seq: Sequence[T]) -> T: ...


# ---- Count replies ----

COUNT_REACTIONS = [
    "今天第 1 支菸。\n超過昨天了，現在是 1 支。還想拿獎勵嗎？\n悠悠聽到後打了個哈欠，抱著自己的尾巴蜷縮在一起，眨了眨眼就睡著了(˘ω˘).｡oO💤～啾～",
    "今天第 2 支菸。\n超過昨天了，現在是 2 支。還想拿獎勵嗎？\n悠悠翻了個身，用小爪子拍拍自己的臉頰，又用尾巴在空中畫圈圈(˶˚ᴗ˚˶)｡oO",
    "今天第 3 支菸。\n超過昨天了，現在是 3 支。還想拿獎勵嗎？\n悠悠抱著小手輕輕揮手，眼睛瞇成一條線，發出輕輕的啾啾聲(๑˃̵ᴗ˂̵)و💨",
    "今天第 4 支菸。\n超過昨天了，現在是 4 支。還想拿獎勵嗎？\n悠悠雙手揣在胸前，腦袋歪了一下(｡･ω･｡)?，尾巴輕輕拍打地面撲通撲通",
    "今天第 5 支菸。\n超過昨天了，現在是 5 支。還想拿獎勵嗎？\n悠悠撓了撓肚子，伸出小爪子做出擁抱姿勢，眼神亮亮地看著你(*´∀`)ﾉ",
    "今天第 6 支菸。\n超過昨天了，現在是 6 支。還想拿獎勵嗎？\n悠悠悄悄地用爪子遮住眼睛，再忽然張開做出驚喜的動作(・∀・)ノ",
    "今天第 7 支菸。\n超過昨天了，現在是 7 支。還想拿獎勵嗎？\n悠悠輕輕搖晃著身體，尾巴繞成小圓圈，最後摟著自己的尾巴躺平嗚嗚～",
    "今天第 8 支菸。\n超過昨天了，現在是 8 支。還想拿獎勵嗎？\n悠悠用小手拍了拍水面，濺出小水花，揮手示意你靠近(*≧ω≦)ゞ",
    "今天第 9 支菸。\n超過昨天了，現在是 9 支。還想拿獎勵嗎？\n悠悠打了個滾，臉頰貼在地上，尾巴翹了起來，做出撒嬌的動作( ˘•ω•˘ )ゝ",
    "今天第 10 支菸。\n超過昨天了，現在是 10 支。還想拿獎勵嗎？\n悠悠撲通一下趴在你面前，用爪子輕撫自己的臉頰，露出期待的眼神(人´∀｀)♡",
    "今天第 11 支菸。\n超過昨天了，現在是 11 支。還想拿獎勵嗎？\n悠悠側身躺著，眼睛眨呀眨，尾巴繞著自己畫圓，像是在思考嗚嗚～",
    "今天第 12 支菸。\n超過昨天了，現在是 12 支。還想拿獎勵嗎？\n悠悠雙手合十放在胸前，臉頰微紅，用力搖頭表示撒嬌的拒絕(๑>◡<๑)",
    "今天第 13 支菸。\n超過昨天了，現在是 13 支。還想拿獎勵嗎？\n悠悠縮成一團，再慢慢伸展四肢，尾巴輕點地面發出啾啾聲(*˘︶˘*).｡oO",
    "今天第 14 支菸。\n超過昨天了，現在是 14 支。還想拿獎勵嗎？\n悠悠抱著自己的尾巴，眨眼微笑，尾巴輕輕拍打著小水花(≧▽≦)ゞ",
    "今天第 15 支菸。\n超過昨天了，現在是 15 支。還想拿獎勵嗎？\n悠悠用小爪子捂住嘴巴，像是在打呵欠，又伸手向你討摸摸(˶‾᷄ ⁻̫ ‾᷅˵)",
    "今天第 16 支菸。\n超過昨天了，現在是 16 支。還想拿獎勵嗎？\n悠悠用爪子拍拍水面，然後抬頭看著你，尾巴繞了幾圈後停在胸前(˘･ᴗ･˘)",
    "今天第 17 支菸。\n超過昨天了，現在是 17 支。還想拿獎勵嗎？\n悠悠將小手放在臉旁，眨眼賣萌，用尾巴輕拍自己像在自言自語(｡>﹏<｡)",
    "今天第 18 支菸。\n超過昨天了，現在是 18 支。還想拿獎勵嗎？\n悠悠在原地打了個滾，抱著自己的尾巴撒嬌，耳邊傳來輕輕的啾啾聲(づ｡◕‿‿◕｡)づ",
    "今天第 19 支菸。\n超過昨天了，現在是 19 支。還想拿獎勵嗎？\n悠悠把尾巴繞成愛心形狀，輕輕點頭又搖頭，像是在表示矛盾(♡˙︶˙♡)",
    "今天第 20 支菸。\n超過昨天了，現在是 20 支。還想拿獎勵嗎？\n悠悠抱著自己的尾巴在水面上慢慢打轉，最後靠在你腳邊睡著了( ᐡ-ܫ-ᐡ )💤",
]

NO_SMOKE_YET = "今天還沒抽菸，保持下去！悠悠雙手合掌為你打氣(๑˃̵ᴗ˂̵)و"
COUNT_FLOURISH = "悠悠歪著頭看看你，尾巴在身旁劃圈，似乎在思考(｡･ω･｡)?"


def compose_count_response(record: CounterRecord) -> str:
    n = record.today
    if 1 <= n <= len(COUNT_REACTIONS):
        return COUNT_REACTIONS[n - 1]
    if n == 0:
        return NO_SMOKE_YET
    lines = [f"今天第 {n} 支菸。"]
    if n < record.yesterday:
        lines.append(f"比昨天少了 {record.yesterday - n} 支，不錯喔！")
    elif n == record.yesterday:
        lines.append("已經跟昨天一樣多了，要克制唷。")
    else:
        lines.append(f"超過昨天了，現在是 {n} 支。還想拿獎勵嗎？")
    lines.append(COUNT_FLOURISH)
    return "\n".join(lines)


# ---- Interaction replies ----

EMOTICONS = [
    "(˶˚ᴗ˚˶)",
    "(๑˃̵ᴗ˂̵)و",
    "(｡･ω･｡)?",
    "(≧▽≦)ゞ",
    "(˘ω˘)",
    "(づ｡◕‿‿◕｡)づ",
    "(｡>﹏<｡)",
    "(*´∀`)ﾉ",
]

SOUNDS = ["啾啾", "撲通", "嗚嗚", "呀～"]
SEPARATOR = "～"


# English keywords must not be embedded in a longer ASCII word ("tea" in "team").
# \b does not work here: CJK characters count as word characters.
def _words(*words: str) -> str:
    return r"(?<![a-z])(" + "|".join(words) + r")(?![a-z])"


# Order matters: the first matching pattern decides the category.
CATEGORY_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"(早安|早上好|morning)", re.I), "morning"),
    (re.compile(r"(晚安|good\s*night)", re.I), "night"),
    (re.compile(r"(摸|撫摸|摸摸|pat)", re.I), "pat"),
    (re.compile(r"(看電視|看电视|tv)", re.I), "tv"),
    (re.compile(r"^\s*(悠悠|yoyo)\s*[!！?？~～。.]*\s*$", re.I), "name"),
    (re.compile(r"(餵|喂食|飼料)|" + _words("feed"), re.I), "feed"),
    (re.compile(r"(抱抱|擁抱|抱一下)|" + _words("hugs?"), re.I), "hug"),
    (re.compile(r"(睡覺|睡午覺|想睡|好睏)|" + _words("sleep", "nap"), re.I), "sleep"),
    (re.compile(r"(玩|遊戲)|" + _words("play", "game"), re.I), "play"),
    (re.compile(r"(吃飯|午餐|晚餐|早餐|宵夜|吃)|" + _words("eat", "lunch", "dinner"), re.I), "eat"),
    (re.compile(r"(喝水|喝茶|咖啡|喝)|" + _words("drink", "coffee", "tea"), re.I), "drink"),
    (
        re.compile(r"(運動|跑步|健身|散步)|" + _words("exercise", "workout", "run", "gym"), re.I),
        "exercise",
    ),
    (re.compile(r"(跳舞)|" + _words("dance", "dancing"), re.I), "dance"),
    (re.compile(r"(唱歌|唱)|" + _words("sing", "singing"), re.I), "sing"),
    (re.compile(r"(看書|讀書|閱讀|看小說)|" + _words("read", "reading"), re.I), "read"),
    (re.compile(r"(畫畫|畫圖|繪畫)|" + _words("draw", "drawing", "paint"), re.I), "draw"),
    (re.compile(r"(打掃|掃地|洗衣服|整理)|" + _words("clean", "cleaning"), re.I), "clean"),
    (re.compile(r"(上班|工作|加班|開會)|" + _words("work", "working", "meeting"), re.I), "work"),
    (re.compile(r"(購物|逛街|買東西)|" + _words("shop", "shopping"), re.I), "shop"),
    (re.compile(r"(煮飯|做飯|料理|下廚)|" + _words("cook", "cooking"), re.I), "cook"),
    (
        re.compile(r"(念書|唸書|考試|寫作業)|" + _words("study", "studying", "exam", "homework"), re.I),
        "study",
    ),
    (re.compile(r"(冥想|靜坐|深呼吸)|" + _words("meditate", "meditation"), re.I), "meditate"),
    (re.compile(r"(滑手機|上網|刷手機|刷影片)|" + _words("browse", "browsing", "scroll"), re.I), "browse"),
    (re.compile(r"(旅行|旅遊|出門|出國)|" + _words("travel", "trip"), re.I), "travel"),
]

ACTION_BASES: dict[str, list[str]] = {
    "morning": [
        "悠悠揉揉眼睛伸了個懶腰，向你揮爪打招呼",
        "悠悠從睡夢中醒來，眨著迷濛的眼睛對你點頭",
    ],
    "night": [
        "悠悠打了個呵欠，用尾巴裹住自己準備睡覺",
        "悠悠窩成一團，慢慢閉上眼睛揮手道晚安",
    ],
    "pat": [
        "悠悠眯起眼睛享受你的撫摸，抱著尾巴發出滿足的聲音",
        "悠悠把頭靠近你的手掌，輕輕蹭了蹭表示喜歡",
    ],
    "tv": [
        "悠悠盯著螢幕看得目不轉睛，偶爾歪頭表達好奇",
        "悠悠坐在你旁邊看電視，時不時拍打尾巴示意你注意精彩畫面",
    ],
    "name": [
        "悠悠聽到自己的名字，豎起耳朵轉頭看你",
        "悠悠啪嗒啪嗒游到你身邊，抬頭等你說下一句",
        "悠悠用尾巴拍了一下水面回應你的呼喚",
    ],
    "feed": [
        "悠悠雙手捧著食物小口小口地啃，臉頰鼓得圓圓的",
        "悠悠聞到食物的味道，尾巴興奮地左右搖擺",
    ],
    "hug": [
        "悠悠張開小爪子撲進你懷裡，緊緊抱住不放",
        "悠悠把臉埋在你胸前，尾巴輕輕纏住你的手腕",
    ],
    "sleep": [
        "悠悠在你旁邊找了個舒服的位置，蜷成一團陪你睡",
        "悠悠抱著尾巴當枕頭，眼皮越來越重",
    ],
    "play": [
        "悠悠叼著小球跑過來，放在你腳邊等你丟出去",
        "悠悠在地上打滾翻身，邀請你一起玩耍",
    ],
    "eat": [
        "悠悠坐在桌邊眼巴巴地看著你的碗，口水快要流下來",
        "悠悠拿起小叉子假裝跟你一起用餐",
    ],
    "drink": [
        "悠悠捧著小杯子咕嚕咕嚕喝了一大口",
        "悠悠學你舉起杯子，結果灑了自己一身水",
    ],
    "exercise": [
        "悠悠跟著你原地跳躍，沒兩下就喘得趴在地上",
        "悠悠揮動小短手做伸展操，表情非常認真",
    ],
    "dance": [
        "悠悠扭動圓滾滾的身體，跟著節拍轉圈圈",
        "悠悠踮起腳尖左搖右擺，尾巴也一起打拍子",
    ],
    "sing": [
        "悠悠張大嘴巴跟著你哼歌，可惜每個音都走調",
        "悠悠閉上眼睛陶醉地搖頭晃腦，替你打節拍",
    ],
    "read": [
        "悠悠湊過來假裝看得懂，其實是在看書上的插圖",
        "悠悠趴在書頁旁邊，用爪子幫你翻下一頁",
    ],
    "draw": [
        "悠悠沾了顏料在紙上按了一個爪印，得意地看著你",
        "悠悠歪頭研究你的畫，然後指著自己要你畫牠",
    ],
    "clean": [
        "悠悠拿尾巴當抹布，努力幫你擦地板",
        "悠悠把散落的小東西一個個推回角落",
    ],
    "work": [
        "悠悠安靜地趴在鍵盤旁邊，偶爾抬頭替你加油",
        "悠悠戴上小眼鏡假裝在開會，一本正經地點頭",
    ],
    "shop": [
        "悠悠坐在購物袋裡，探出頭來東張西望",
        "悠悠指著貨架上的小零食，用期待的眼神看你",
    ],
    "cook": [
        "悠悠站在流理台邊聞著香味，肚子咕嚕咕嚕叫",
        "悠悠遞給你一顆洗好的番茄，假裝自己是小幫手",
    ],
    "study": [
        "悠悠幫你壓著課本的頁角，陪你一起用功",
        "悠悠在旁邊打瞌睡，每隔一會兒就驚醒替你加油",
    ],
    "meditate": [
        "悠悠盤起尾巴閉上眼睛，跟你一起慢慢深呼吸",
        "悠悠安安靜靜地坐著，連鬍鬚都不動一下",
    ],
    "browse": [
        "悠悠把頭湊到手機螢幕前，跟著你一起滑",
        "悠悠用小爪子戳戳螢幕，想看你在看什麼",
    ],
    "travel": [
        "悠悠背起小背包，站在門口等你出發",
        "悠悠擠進你的行李箱，只露出一條尾巴",
    ],
    "default": [
        "悠悠歪著頭看看你，不太明白但還是可愛地揮了揮爪",
        "悠悠滾了個圈圈，尾巴輕拍地面示意牠聽不懂",
    ],
}


def classify(message: str) -> str:
    for pattern, category in CATEGORY_PATTERNS:
        if pattern.search(message):
            return category
    return "default"


def build_reaction(base: str, rng: Chooser | None = None) -> str:
    rng = rng or random.Random()
    return f"{base}{rng.choice(EMOTICONS)}{SEPARATOR}{rng.choice(SOUNDS)}"


def compose_interaction_response(message: str, rng: Chooser | None = None) -> str:
    rng = rng or random.Random()
    pool = ACTION_BASES.get(classify(message), ACTION_BASES["default"])
    return build_reaction(rng.choice(pool), rng)


# ---- Weather report ----

# WMO weather codes used by Open-Meteo
WEATHER_CODES = {
    0: "晴朗",
    1: "少雲",
    2: "半雲",
    3: "多雲",
    45: "有霧",
    48: "霧凇",
    51: "輕微霧雨",
    53: "中度霧雨",
    55: "強霧雨",
    56: "輕微冰霧雨",
    57: "強冰霧雨",
    61: "小雨",
    63: "中雨",
    65: "大雨",
    66: "輕微冰雨",
    67: "強冰雨",
    71: "小雪",
    73: "中雪",
    75: "大雪",
    77: "雪粒",
    80: "陣雨",
    81: "中陣雨",
    82: "大陣雨",
    85: "陣雪",
    86: "強陣雪",
    95: "雷雨",
    96: "雷雨伴有冰雹",
    99: "雷雨伴有強冰雹",
}

WEATHER_BASE = "悠悠抬頭看看窗外的天氣，"
WEATHER_FAILED = "取得天氣資料失敗。"


def describe_weather_code(code: int) -> str:
    return WEATHER_CODES.get(code, f"代碼 {code}")


def compose_weather_report(weather, rng: Chooser | None = None) -> str:
    """Render a `clients.weather.Weather` snapshot with a reaction appended."""
    lines = [
        f"{weather.city}今日天氣：{describe_weather_code(weather.code)}。",
        f"現在溫度 {weather.current_temp}°C，最高 {weather.max_temp}°C，最低 {weather.min_temp}°C。",
    ]
    if weather.precipitation_chance is not None:
        lines.append(f"降雨機率 {weather.precipitation_chance}%。")
    if weather.us_aqi is not None:
        aq = f"空氣品質 AQI {weather.us_aqi}"
        if weather.pm2_5 is not None:
            aq += f"（PM2.5 {weather.pm2_5} μg/m³）"
        lines.append(aq + "。")
    lines.append(build_reaction(WEATHER_BASE, rng))
    return "\n".join(lines)

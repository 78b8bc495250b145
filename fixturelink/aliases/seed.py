"""Well-known spellings that the feeds disagree on.

Used as the alias table when no Supabase project is configured, and as a
starting point for a fresh store.
"""

from typing import Dict, List

from fixturelink.models.alias import CanonicalNameRecord
from fixturelink.models.enums import EntityType

SEED_TEAMS: List[CanonicalNameRecord] = [
    CanonicalNameRecord(
        canonical_key="team:manchesterunited",
        name_en="Manchester United",
        name_zh_cn="曼联",
        name_zh_tw="曼聯",
        aliases=("Man United", "Man Utd", "MUFC"),
    ),
    CanonicalNameRecord(
        canonical_key="team:manchestercity",
        name_en="Manchester City",
        name_zh_cn="曼城",
        aliases=("Man City", "MCFC"),
    ),
    CanonicalNameRecord(
        canonical_key="team:tottenhamhotspur",
        name_en="Tottenham Hotspur",
        name_zh_cn="热刺",
        name_zh_tw="熱刺",
        aliases=("Tottenham", "Spurs"),
    ),
    CanonicalNameRecord(
        canonical_key="team:newcastleunited",
        name_en="Newcastle United",
        name_zh_cn="纽卡斯尔联",
        aliases=("Newcastle",),
    ),
    CanonicalNameRecord(
        canonical_key="team:westhamunited",
        name_en="West Ham United",
        name_zh_cn="西汉姆联",
        aliases=("West Ham",),
    ),
    CanonicalNameRecord(
        canonical_key="team:brightonhovealbion",
        name_en="Brighton & Hove Albion",
        name_zh_cn="布莱顿",
        aliases=("Brighton",),
    ),
    CanonicalNameRecord(
        canonical_key="team:nottinghamforest",
        name_en="Nottingham Forest",
        name_zh_cn="诺丁汉森林",
        aliases=("Nott Forest", "Notts Forest"),
    ),
    CanonicalNameRecord(
        canonical_key="team:psveindhoven",
        name_en="PSV Eindhoven",
        aliases=("PSV",),
    ),
    CanonicalNameRecord(
        canonical_key="team:herthabsc",
        name_en="Hertha BSC",
        aliases=("Hertha Berlin",),
    ),
    CanonicalNameRecord(
        canonical_key="team:bayernmunich",
        name_en="Bayern Munich",
        name_zh_cn="拜仁慕尼黑",
        aliases=("Bayern", "FC Bayern", "Bayern München"),
    ),
    CanonicalNameRecord(
        canonical_key="team:borussiadortmund",
        name_en="Borussia Dortmund",
        name_zh_cn="多特蒙德",
        aliases=("BVB", "Dortmund"),
    ),
    CanonicalNameRecord(
        canonical_key="team:intermilan",
        name_en="Inter Milan",
        name_zh_cn="国际米兰",
        name_zh_tw="國際米蘭",
        aliases=("Inter", "Internazionale"),
    ),
    CanonicalNameRecord(
        canonical_key="team:acmilan",
        name_en="AC Milan",
        name_zh_cn="AC米兰",
        aliases=("Milan",),
    ),
    CanonicalNameRecord(
        canonical_key="team:atleticomadrid",
        name_en="Atletico Madrid",
        name_zh_cn="马德里竞技",
        aliases=("Atletico", "ATM"),
    ),
    CanonicalNameRecord(
        canonical_key="team:athleticbilbao",
        name_en="Athletic Bilbao",
        aliases=("Athletic Club",),
    ),
    CanonicalNameRecord(
        canonical_key="team:realsociedad",
        name_en="Real Sociedad",
        aliases=("Sociedad",),
    ),
    CanonicalNameRecord(
        canonical_key="team:parissaintgermain",
        name_en="Paris Saint Germain",
        name_zh_cn="巴黎圣日耳曼",
        aliases=("PSG", "Paris SG"),
    ),
    CanonicalNameRecord(
        canonical_key="team:olympiquemarseille",
        name_en="Olympique Marseille",
        name_zh_cn="马赛",
        aliases=("Marseille", "OM"),
    ),
    CanonicalNameRecord(
        canonical_key="team:olympiquelyon",
        name_en="Olympique Lyon",
        name_zh_cn="里昂",
        aliases=("Lyon", "OL"),
    ),
    CanonicalNameRecord(
        canonical_key="team:qingdaohainiu",
        name_en="Qingdao Hainiu",
        name_zh_cn="青岛海牛",
        name_zh_tw="青島海牛",
        aliases=("Qingdao",),
    ),
    CanonicalNameRecord(
        canonical_key="team:wuhanthreetowns",
        name_en="Wuhan Three Towns",
        name_zh_cn="武汉三镇",
        name_zh_tw="武漢三鎮",
        aliases=("Wuhan",),
    ),
    CanonicalNameRecord(
        canonical_key="team:suwon",
        name_en="Suwon",
        name_zh_cn="水原",
    ),
    CanonicalNameRecord(
        canonical_key="team:daegu",
        name_en="Daegu",
        name_zh_cn="大邱",
    ),
    CanonicalNameRecord(
        canonical_key="team:chungnamasan",
        name_en="Chungnam Asan",
        name_zh_cn="忠南牙山",
    ),
    CanonicalNameRecord(
        canonical_key="team:cheonancity",
        name_en="Cheonan City",
        name_zh_tw="天安城",
    ),
    CanonicalNameRecord(
        canonical_key="team:northerndistrict",
        name_en="Northern District",
        name_zh_cn="北区",
        name_zh_tw="北區",
    ),
    CanonicalNameRecord(
        canonical_key="team:southerndistrict",
        name_en="Southern District",
        name_zh_cn="南区",
        name_zh_tw="南區足球會",
    ),
]

SEED_LEAGUES: List[CanonicalNameRecord] = [
    CanonicalNameRecord(
        canonical_key="league:englishpremierleague",
        name_en="English Premier League",
        name_zh_cn="英超",
        name_zh_tw="英格蘭超級聯賽",
        aliases=("Premier League", "EPL", "England Premier League"),
    ),
    CanonicalNameRecord(
        canonical_key="league:spainlaliga",
        name_en="Spain La Liga",
        name_zh_cn="西甲",
        aliases=("La Liga", "Spain Primera Division", "LaLiga"),
    ),
    CanonicalNameRecord(
        canonical_key="league:germanybundesliga",
        name_en="Germany Bundesliga",
        name_zh_cn="德甲",
        aliases=("Bundesliga", "Germany Bundesliga 1"),
    ),
    CanonicalNameRecord(
        canonical_key="league:italyseriea",
        name_en="Italy Serie A",
        name_zh_cn="意甲",
        aliases=("Serie A",),
    ),
    CanonicalNameRecord(
        canonical_key="league:japanj2league",
        name_en="Japan J2 League",
        name_zh_cn="日职乙",
        name_zh_tw="日職乙",
        aliases=("J2 League", "J League Division 2"),
    ),
    CanonicalNameRecord(
        canonical_key="league:chinasuperleague",
        name_en="China Super League",
        name_zh_cn="中超",
        aliases=("Chinese Super League", "CSL"),
    ),
]


def seed_records() -> Dict[EntityType, List[CanonicalNameRecord]]:
    return {EntityType.LEAGUE: list(SEED_LEAGUES), EntityType.TEAM: list(SEED_TEAMS)}

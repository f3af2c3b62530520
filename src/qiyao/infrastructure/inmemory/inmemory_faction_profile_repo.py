from __future__ import annotations

from typing import Dict, List, Optional

from qiyao.domain.models.faction import FactionId, FactionProfile
from qiyao.domain.repositories import FactionProfileRepository


class InMemoryFactionProfileRepository(FactionProfileRepository):
    def __init__(self, profiles: Optional[Dict[FactionId, FactionProfile]] = None) -> None:
        if profiles is not None:
            self._profiles = dict(profiles)
            return
        self._profiles: Dict[FactionId, FactionProfile] = {
            FactionId.TIANHE: FactionProfile(
                id=FactionId.TIANHE,
                name="Tianhe Sword Sect",
                title="Sword of the Heavenly River",
                description="Orthodox swordsmen who believe the blade should return to the righteous.",
                bonus="Martial prowess",
                weapon="Long sword",
                colour="cyan",
            ),
            FactionId.BEIGE: FactionProfile(
                id=FactionId.BEIGE,
                name="Beige Academy",
                title="Hall of Elegiac Song",
                description="Scholar-strategists who fight with brush, zither and ledger.",
                bonus="Strategy",
                weapon="Iron brush",
                colour="white",
            ),
            FactionId.WANGSHENG: FactionProfile(
                id=FactionId.WANGSHENG,
                name="Wangsheng Gate",
                title="Gate of Rebirth",
                description="Assassins who settle debts for the dead and collect from the living.",
                bonus="Ambush",
                weapon="Twin daggers",
                colour="magenta",
            ),
            FactionId.FULONG: FactionProfile(
                id=FactionId.FULONG,
                name="Fulong Manor",
                title="Manor of the Subdued Dragon",
                description="A merchant clan whose caravans reach every province.",
                bonus="Wealth",
                weapon="Golden abacus",
                colour="yellow",
            ),
            FactionId.NANTUO: FactionProfile(
                id=FactionId.NANTUO,
                name="Nantuo Mountain",
                title="Monks of Nanda Peak",
                description="Warrior monks sworn to keep the blade from any single hand.",
                bonus="Endurance",
                weapon="Iron staff",
                colour="bright_yellow",
            ),
            FactionId.XUEYI: FactionProfile(
                id=FactionId.XUEYI,
                name="Xueyi Tower",
                title="Tower of Snow Robes",
                description="An information house whose spies wear white even at night.",
                bonus="Intelligence",
                weapon="Silk ribbon",
                colour="bright_white",
            ),
            FactionId.DARI: FactionProfile(
                id=FactionId.DARI,
                name="Dari Glass Palace",
                title="Palace of the Great Sun",
                description="Foreign sun-worshippers from beyond the western passes.",
                bonus="Prestige",
                weapon="Sun wheel",
                colour="red",
            ),
        }

    def get(self, faction_id: FactionId) -> FactionProfile:
        return self._profiles[FactionId.parse(faction_id)]

    def list_all(self) -> List[FactionProfile]:
        return [self._profiles[faction_id] for faction_id in FactionId.ordered() if faction_id in self._profiles]

"""Occasional supplication replies to Arabic messages."""

import random

from mushafbot.auto_reply.classifier import ClassifiedMessage
from mushafbot.config.schema import AutoDuaaConfig


DUAA_LIST = [
    "🤲 *اللهم اغفر لنا ذنوبنا وكفر عنا سيئاتنا وتوفنا مع الأبرار*",
    "🤲 *اللهم بارك لنا في أعمارنا وأعمالنا وأرزاقنا وذرياتنا*",
    "🤲 *اللهم اجعلنا ممن يستمعون القول فيتبعون أحسنه*",
    "🤲 *اللهم ثبت قلوبنا على دينك وطاعتك*",
    "🤲 *اللهم اكفنا بحلالك عن حرامك وأغننا بفضلك عمن سواك*",
    "🤲 *اللهم إنا نسألك علماً نافعاً ورزقاً طيباً وعملاً متقبلاً*",
    "🤲 *اللهم اجعل القرآن الكريم ربيع قلوبنا ونور صدورنا*",
    "🤲 *اللهم أصلح لنا ديننا الذي هو عصمة أمرنا وأصلح لنا دنيانا التي فيها معاشنا*",
    "🤲 *اللهم إنا نعوذ بك من الهم والحزن والعجز والكسل والبخل والجبن وضلع الدين وغلبة الرجال*",
    "🤲 *اللهم آتنا في الدنيا حسنة وفي الآخرة حسنة وقنا عذاب النار*",
    "🤲 *سبحان الله وبحمده سبحان الله العظيم*",
    "🤲 *اللهم أنت ربي لا إله إلا أنت خلقتني وأنا عبدك وأنا على عهدك ووعدك ما استطعت*",
    "🤲 *اللهم اغفر لي ولوالديّ وللمسلمين والمسلمات الأحياء منهم والأموات*",
    "🤲 *لا إله إلا أنت سبحانك إني كنت من الظالمين*",
    "🤲 *اللهم صل وسلم وبارك على سيدنا محمد وعلى آله وصحبه أجمعين*",
    "🤲 *اللهم يسر ولا تعسر وبشر ولا تنفر*",
    "🤲 *اللهم اجعلنا من عبادك الصالحين واحشرنا في زمرة النبيين والصديقين والشهداء والصالحين*",
    "🤲 *اللهم إنا نسألك الجنة وما قرب إليها من قول أو عمل ونعوذ بك من النار وما قرب إليها من قول أو عمل*",
    "🤲 *ربنا لا تزغ قلوبنا بعد إذ هديتنا وهب لنا من لدنك رحمة إنك أنت الوهاب*",
    "🤲 *اللهم اجعل خير أعمالنا خواتيمها وخير أيامنا يوم نلقاك*",
]


class AmbientResponder:
    """Picks a supplication for roughly one in N Arabic messages."""

    def __init__(
        self,
        config: AutoDuaaConfig | None = None,
        rng: random.Random | None = None,
        phrases: list[str] | None = None,
    ):
        self.config = config or AutoDuaaConfig()
        self.phrases = phrases or DUAA_LIST
        self._rng = rng or random.Random()

    def pick(self, message: ClassifiedMessage) -> str | None:
        """Return a supplication to send, or None."""
        if not self.config.enabled or not message.has_arabic:
            return None
        if self._rng.random() >= 1 / self.config.probability:
            return None
        return self._rng.choice(self.phrases)

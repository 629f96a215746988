# apps/tracker/inspiration.py
from django.core.cache import cache
from django.utils import timezone

QUOTES = [
    ("تعليم أبنائنا القرآن هو أساس التربية الإسلامية. قال النبي ﷺ: 'خيركم من تعلّم القرآن وعلمه'.", "حديث شريف"),
    ("منهجه ﷺ في تعليم القرآن لم يكن مجرد حفظ، بل تعليم للحكمة والتزكية والتطبيق.", "آية قرآنية (آل عمران: 164)"),
    ("القرآن منهج رباني لتنشئة النشء وركيزة لبناء الأمة.", "مقالة تربوية"),
    ("المداومة على القرآن تزكّي النفوس وترقّق القلوب.", "توجيه إيماني"),
    ("من سلك طريقًا يلتمس فيه علمًا، سهل الله له طريقًا إلى الجنة.", "حديث شريف"),
    ("احفظ الله يحفظك.", "حديث نبوي"),
    ("أفضل ما يترك الإنسان: ولد صالح يدعو له، وعلم ينتفع به.", "حديث شريف"),
    ("التربية بالقرآن ليست حفظ حروف فقط، بل غرس قيم مثل الصدق والصبر.", "رؤية تربوية"),
    ("الصبر في ميدان الحفظ والمعرفة خلق مؤمن عميق.", "نصيحة تربوية"),
    ("العلم نور القلب، والقرآن يُرسّخ الثبات والسكينة.", "مقولة تربوية"),
    ("الطفل الذي ينشأ مع كتاب الله لا يخشى ضياع الطريق.", "توجيه أسري"),
    ("من أعظم صور البر تعليم الابن القرآن وتربيته على حب كلام الله.", "توصية تربوية"),
    ("غرس حب القرآن في الصغار صدقة جارية لا تنقطع.", "مقالة تربوية"),
    ("قال الإمام مالك: 'تعلموا الأدب قبل العلم'. والقرآن يجمعهما معًا.", "أثر عن مالك بن أنس"),
    ("من جالس القرآن فلا يندم، ومن سار معه لا يضل.", "مقولة"),
    ("سعادة المربي في رؤية تلاميذه يحملون القرآن في صدورهم وأخلاقهم.", "رسالة تشجيعية"),
    ("قال الشافعي: 'من تعلّم القرآن عظمت قيمته'.", "أثر عن الإمام الشافعي"),
    ("اجعل القرآن رفيق يومك في التربية تجد السكينة في بيتك وتلاميذك.", "نصيحة أبوية"),
    ("أبناؤكم أمانة، وقرآن يُحفَظ فيهم نور لكم يوم تبيضّ الوجوه.", "مقولة توعوية"),
    ("احرص على ألا ينتهي يومك دون أن تهدي تلميذك آية فيها نور.", "نصيحة للمربين"),
    ("القرآن كالمطر، ينبت في كل قلب ما يناسبه من الثمر.", "تأمل قرآني"),
]


def quote_for_day(day):
    text, source = QUOTES[(day.day - 1) % len(QUOTES)]
    return {"text": text, "source": source}


def daily_quote(today=None):
    """حكمة اليوم، محفوظة في الكاش حتى نهاية اليوم."""
    today = today or timezone.localdate()
    key = f"daily-quote:{today.isoformat()}"
    quote = cache.get(key)
    if quote is None:
        quote = quote_for_day(today)
        cache.set(key, quote, 60 * 60 * 24)
    return quote

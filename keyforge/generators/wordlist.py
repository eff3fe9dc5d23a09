"""
Fixed word list and syllable alphabets used by the passphrase, pattern
and pronounceable generators.

Words are short, lower-case and unambiguous when read aloud. The list is
part of the keyspace: changing it changes the structural entropy of every
passphrase and pattern candidate.
"""

from __future__ import annotations

_RAW_WORDS = """
able acid aged also area army away baby back bake ball band bank barn base
bath beam bean bear beat bell belt bench berry bike bird blade blank blaze
blue boat body bold bolt bone book boot born boss bowl brave bread brick
bride brook brush cabin cable cake calm camel camp candy cane cape card cargo
cart cash castle cave cedar chain chair chalk charm chase cheek chess chief
chip city clay cliff climb clock cloud coach coast coin comet coral cord corn
couch cove crab crane crisp crow crown cube curve dance dawn deck deer delta
desk dial diner dock dome door dove draft dream drift drum duck dune dust
eagle earth easel echo edge elbow ember empty equal fable fair falcon fancy
farm feast fence fern ferry field flame flask fleet flint flock flute foam
focus forge fork fort fox frame frost fruit gale game garden gate gem giant
glade globe glove goat gold grain grape grass gravel grove guard guide gull
habit hammer harbor hatch hawk hazel heart hedge helm hero hill honey hook
horse hotel house ivory jacket jade jelly jewel judge juice jungle kayak kettle
kite knee knot ladder lake lamp lane lark laser lava lawn leaf ledge lemon
lever lily lime linen lion lodge lotus lunar magnet mango maple marble market
meadow melon metal mint mirror model monk moon moss motor mount mule nectar
needle nest noble north novel oak oasis ocean olive onion opal orbit otter
oven owl paddle palm panda paper parade patch peach pearl pebble pepper piano
pilot pine pixel plain planet plaza plum polar pond poppy port prism pulse
quail quartz quest quill radar raft rain ranch raven reef ridge river robin
rocket roof rope rose ruby saddle sage sail salt sand satin scale scout seal
shadow shell shore silk silver sketch sky slate sled smoke snow solar spark
spice spoon spring spruce squid stamp star steam stone storm straw stream
sugar summit sun swan table tango temple thorn thunder tiger timber toast
torch tower trail train tulip tundra turtle umbrella valley vapor velvet
violet vista voyage wagon walnut water wave whale wheat willow window winter
wolf wood yacht yarn zebra zenith
"""

WORDS: tuple[str, ...] = tuple(dict.fromkeys(_RAW_WORDS.split()))

CONSONANTS = "bcdfghjklmnpqrstvwxyz"
VOWELS = "aeiou"

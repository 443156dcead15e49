"""Server-side Lua scripts executed with EVAL.

Each script runs atomically on the Redis server, so the existence check and
the write(s) that follow it cannot interleave with other clients.
"""

# KEYS[1]: record hash, KEYS[2]: owner index (sorted set)
# ARGV[1]: code, ARGV[2]: owner index score, ARGV[3..]: hash field/value pairs
# Returns 1 on insert, 0 if the code is taken.
INSERT_RECORD = """
if redis.call('EXISTS', KEYS[1]) == 1 then
    return 0
end
redis.call('HSET', KEYS[1], unpack(ARGV, 3))
redis.call('ZADD', KEYS[2], ARGV[2], ARGV[1])
return 1
"""

# KEYS[1]: record hash, KEYS[2]: click log (list)
# ARGV[1]: JSON encoded click event
# Returns nil if the record doesn't exist, else {HGETALL record, LRANGE click log}.
RECORD_CLICK = """
if redis.call('EXISTS', KEYS[1]) == 0 then
    return false
end
redis.call('HINCRBY', KEYS[1], 'click_count', 1)
redis.call('RPUSH', KEYS[2], ARGV[1])
return {redis.call('HGETALL', KEYS[1]), redis.call('LRANGE', KEYS[2], 0, -1)}
"""

# KEYS[1]: record hash
# Returns 1 if the flag was set, 0 if the record doesn't exist.
MARK_EXPIRED = """
if redis.call('EXISTS', KEYS[1]) == 0 then
    return 0
end
redis.call('HSET', KEYS[1], 'expired', '1')
return 1
"""
